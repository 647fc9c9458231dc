"""
CLI commands for the company formation backend.
"""

import sys
import click
import yaml

from company_formation.core.config import Config
from company_formation.core.exceptions import CompanyFormationError, ConfigurationError
from company_formation.core.models import NameQuery
from company_formation.registry.availability import NameAvailabilityChecker
from company_formation.registry.client import CompaniesHouseClient
from company_formation.sic.catalog import SicCatalog
from company_formation.utils.logging_config import setup_logging


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _load_config(config_path: str) -> Config:
    try:
        return Config(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Error loading configuration: {e}", err=True)
        sys.exit(1)


@click.command()
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH,
              type=click.Path(), help='Path to YAML configuration file')
@click.option('--host', default=None, help='Interface to bind (overrides config)')
@click.option('--port', default=None, type=int, help='Port to listen on (overrides config)')
@click.option('--debug', is_flag=True, help='Run Flask in debug mode')
def serve(config_path: str, host: str, port: int, debug: bool):
    """Run the HTTP API server."""
    from company_formation.web.app import create_app

    config = _load_config(config_path)
    logger = setup_logging(config.logging_config)

    try:
        config.validate()
    except ConfigurationError as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)

    server = config.server_config
    host = host or server.get('host', '0.0.0.0')
    port = port or int(server.get('port', 3000))

    app = create_app(config=config)
    logger.info(f"Server running on port {port}")
    app.run(host=host, port=port, debug=debug, threaded=True)


@click.command('check-name')
@click.argument('company_name')
@click.option('--api-key', envvar='COMPANIES_HOUSE_API_KEY', required=True,
              help='Companies House API key')
def check_name(company_name: str, api_key: str):
    """Check whether a company name is available."""
    try:
        query = NameQuery.from_payload({'companyName': company_name})
        checker = NameAvailabilityChecker(CompaniesHouseClient(api_key=api_key))
        result = checker.check(query)
    except (CompanyFormationError, ValueError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    if result.available:
        click.echo(click.style(f"✅ '{company_name}' is available", fg="green", bold=True))
        return

    click.echo(click.style(f"⚠️  '{company_name}' is already registered", fg="yellow", bold=True))
    click.echo("Suggestions:")
    for suggestion in result.suggestions:
        click.echo(f"  - {suggestion}")


@click.command('sic-search')
@click.argument('query')
@click.option('--data-file', default=None, type=click.Path(exists=True),
              help='SIC code dataset (defaults to the bundled catalog)')
def sic_search(query: str, data_file: str):
    """Search SIC codes by code or description."""
    try:
        catalog = SicCatalog.from_file(data_file)
    except ConfigurationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    results = catalog.search(query)
    if not results:
        click.echo("No matching SIC codes")
        return

    for sic in results:
        click.echo(f"{sic.code}  {sic.description}")


@click.group('config')
def config_commands():
    """Configuration management commands."""
    pass


@config_commands.command('show')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, type=click.Path())
def config_show(config_path: str):
    """Show current configuration with secrets masked."""
    config = _load_config(config_path)
    config_dict = config.get_all()

    for section, key in (('companies_house', 'api_key'), ('stripe', 'secret_key'),
                         ('stripe', 'webhook_secret'), ('brevo', 'api_key')):
        values = config_dict.get(section)
        if isinstance(values, dict) and values.get(key):
            config_dict[section] = dict(values, **{key: '********'})

    click.echo("Current Configuration:")
    click.echo(yaml.dump(config_dict, default_flow_style=False, sort_keys=False))


@config_commands.command('validate')
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG_PATH, type=click.Path())
def config_validate(config_path: str):
    """Validate configuration file."""
    config = _load_config(config_path)
    try:
        config.validate()
    except ConfigurationError as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)
    click.echo("✅ Configuration is valid")


@config_commands.command('example')
def config_example():
    """Show example configuration."""
    example_config = {
        'server': {'host': '0.0.0.0', 'port': '${PORT:-3000}'},
        'companies_house': {
            'api_key': '${COMPANIES_HOUSE_API_KEY}',
            'base_url': 'https://api.company-information.service.gov.uk',
            'timeout': 30
        },
        'stripe': {
            'secret_key': '${STRIPE_SECRET_KEY}',
            'webhook_secret': '${STRIPE_WEBHOOK_SECRET}'
        },
        'brevo': {
            'api_key': '${BREVO_API_KEY}',
            'sender': {'name': 'Company Registration', 'email': 'registrations@example.com'},
            'recipients': ['formations@example.com']
        },
        'registrations': {'log_file': 'registrations.json'},
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'file': 'logs/company_formation.log'
        }
    }

    click.echo("Example Configuration:")
    click.echo(yaml.dump(example_config, default_flow_style=False, sort_keys=False))
    click.echo("\nTo use this configuration:")
    click.echo("1. Save to config/config.yaml")
    click.echo("2. Set the API key environment variables (or put them in .env)")
    click.echo("3. Adjust sender and recipients as needed")
