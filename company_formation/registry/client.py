"""
Companies House search API client for company name lookups.
"""

import logging
import requests
from typing import List, Optional

from company_formation.core.exceptions import RegistryAPIError
from company_formation.core.models import RegistryCandidate


DEFAULT_BASE_URL = "https://api.company-information.service.gov.uk"


class CompaniesHouseClient:
    """
    Client for the Companies House public data search API.

    Issues a single keyword search per call. Requests are not retried: any
    failure is reported to the caller as a RegistryAPIError.
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: Optional[float] = 30, items_per_page: int = 20):
        """
        Initialize the Companies House client.

        Args:
            api_key: Companies House REST API key
            base_url: API root URL
            timeout: Request timeout in seconds (None waits indefinitely)
            items_per_page: Number of candidates to request per search

        Raises:
            ValueError: If API key is not provided
        """
        if not api_key or not api_key.strip():
            raise ValueError(
                "Companies House API key is required. "
                "Please set the COMPANIES_HOUSE_API_KEY environment variable. "
                "Get your API key from: https://developer.company-information.service.gov.uk/"
            )

        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.items_per_page = items_per_page
        self.logger = logging.getLogger(__name__)

    def search_companies(self, query: str) -> List[RegistryCandidate]:
        """
        Search the registry for companies matching a keyword query.

        Args:
            query: Raw company name as entered by the user

        Returns:
            List of RegistryCandidate objects in registry order

        Raises:
            RegistryAPIError: For network errors, auth failures, non-2xx
                responses or malformed payloads
        """
        url = f"{self.base_url}/search/companies"
        params = {
            "q": query,
            "items_per_page": self.items_per_page
        }

        try:
            # Basic auth: API key as username, empty password
            response = requests.get(url, params=params, auth=(self.api_key, ''),
                                    timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryAPIError(f"Network error during registry search: {e}")

        if response.status_code == 401:
            raise RegistryAPIError("Registry rejected the API key (401 Unauthorized)")

        if not 200 <= response.status_code < 300:
            raise RegistryAPIError(
                f"Registry request failed with status {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RegistryAPIError(f"Invalid JSON response: {e}")

        if not isinstance(data, dict):
            raise RegistryAPIError("Unexpected registry response shape")

        candidates = []
        for item in data.get("items") or []:
            # Skip malformed items
            if not isinstance(item, dict):
                continue

            title = item.get("title")
            if not isinstance(title, str) or not title:
                continue

            candidates.append(RegistryCandidate(
                title=title,
                company_number=item.get("company_number"),
                company_status=item.get("company_status")
            ))

        self.logger.debug(f"Registry returned {len(candidates)} candidates for '{query}'")
        return candidates
