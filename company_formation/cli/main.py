"""
Main CLI entry point for the company formation backend.
"""

import click

from company_formation import __version__
from company_formation.cli.commands import serve, check_name, sic_search, config_commands


@click.group()
@click.version_option(version=__version__, message='Company Formation Backend v%(version)s')
def main():
    """Company Formation Backend - UK company registration API and tools."""
    pass


main.add_command(serve)
main.add_command(check_name)
main.add_command(sic_search)
main.add_command(config_commands)


if __name__ == '__main__':
    main()
