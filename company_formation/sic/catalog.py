"""
SIC code catalog loaded once at start-up and searched by substring.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from company_formation.core.exceptions import ConfigurationError
from company_formation.core.models import SicCode


logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "sic_codes.json"
MIN_QUERY_LENGTH = 2
MAX_RESULTS = 15


class SicCatalog:
    """
    Immutable, in-memory catalog of SIC codes.

    The catalog has no write path, so a single instance is shared by all
    request handlers without locking.
    """

    def __init__(self, codes: Iterable[SicCode]):
        self._codes: Tuple[SicCode, ...] = tuple(codes)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> 'SicCatalog':
        """
        Load the catalog from a JSON array of {code, description} objects.

        Args:
            path: Dataset path (defaults to the packaged dataset)

        Returns:
            SicCatalog instance

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        data_path = Path(path) if path else DEFAULT_DATA_FILE

        try:
            with open(data_path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"SIC code dataset not found: {data_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid SIC code dataset {data_path}: {e}")

        if not isinstance(raw, list):
            raise ConfigurationError(f"SIC code dataset must be a JSON array: {data_path}")

        codes = []
        for entry in raw:
            try:
                codes.append(SicCode(code=str(entry['code']),
                                     description=str(entry.get('description', ''))))
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                raise ConfigurationError(f"Malformed SIC code entry {entry!r}: {e}")

        logger.info(f"Loaded {len(codes)} SIC codes from {data_path}")
        return cls(codes)

    def __len__(self) -> int:
        return len(self._codes)

    @property
    def codes(self) -> Tuple[SicCode, ...]:
        return self._codes

    def search(self, query: Optional[str], limit: int = MAX_RESULTS) -> List[SicCode]:
        """
        Find codes whose code or description contains the query.

        Queries shorter than two characters (after trimming) return no
        results. Matches are returned in catalog order, without ranking.

        Args:
            query: Free-text search string
            limit: Maximum number of results

        Returns:
            Matching SicCode entries
        """
        needle = (query or '').strip().casefold()
        if len(needle) < MIN_QUERY_LENGTH:
            return []

        results = []
        for sic in self._codes:
            if needle in sic.code or needle in sic.description.casefold():
                results.append(sic)
                if len(results) >= limit:
                    break

        return results
