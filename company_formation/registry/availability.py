"""
Company name availability checking against registry search results.
"""

import logging
import re
from typing import Iterable, List

from company_formation.core.models import AvailabilityResult, NameQuery, RegistryCandidate
from company_formation.registry.client import CompaniesHouseClient


logger = logging.getLogger(__name__)

# Entity suffixes treated as equivalent to the bare name
EQUIVALENT_SUFFIXES = ("", " LIMITED", " LTD")

# Appended to the original name, in this order, when the name is taken
SUGGESTION_SUFFIXES = (" UK", " Solutions", " Group", " Holdings", " Services")

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_name(name: str) -> str:
    """Trim, uppercase and collapse whitespace runs to a single space."""
    return _WHITESPACE_RE.sub(' ', name.strip().upper())


def is_collision(query_name: str, candidates: Iterable[RegistryCandidate]) -> bool:
    """
    Decide whether a proposed name collides with an existing company.

    A candidate collides when its normalized title equals the normalized
    query, optionally followed by LIMITED or LTD. Punctuation and
    homophones are not folded.

    Args:
        query_name: Proposed company name
        candidates: Registry candidates to compare against

    Returns:
        True if any candidate collides
    """
    normalized = normalize_name(query_name)
    taken = {normalized + suffix for suffix in EQUIVALENT_SUFFIXES}
    return any(normalize_name(candidate.title) in taken for candidate in candidates)


def build_suggestions(company_name: str) -> List[str]:
    """Alternative names built from the name exactly as submitted."""
    return [f"{company_name}{suffix}" for suffix in SUGGESTION_SUFFIXES]


class NameAvailabilityChecker:
    """
    Check a proposed company name against the Companies House register.

    Suggestions are offered when the name is taken but are not themselves
    checked for availability.
    """

    def __init__(self, registry_client: CompaniesHouseClient):
        """
        Initialize the checker.

        Args:
            registry_client: Client used to search the registry
        """
        self.registry_client = registry_client

    def check(self, query: NameQuery) -> AvailabilityResult:
        """
        Check whether a company name is available.

        Args:
            query: Validated name query

        Returns:
            AvailabilityResult with suggestions when the name is taken

        Raises:
            RegistryAPIError: If the registry search fails
        """
        candidates = self.registry_client.search_companies(query.company_name)

        if is_collision(query.company_name, candidates):
            logger.info(f"Company name '{query.company_name}' is already registered")
            return AvailabilityResult(available=False,
                                      suggestions=build_suggestions(query.company_name))

        logger.info(f"Company name '{query.company_name}' is available")
        return AvailabilityResult(available=True, suggestions=[])
