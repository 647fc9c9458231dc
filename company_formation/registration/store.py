"""
Append-only JSON-lines log of submitted registrations.
"""

import logging
import threading
from pathlib import Path
from typing import Dict

from company_formation.core.exceptions import RecordStoreError
from company_formation.core.models import RegistrationRecord


logger = logging.getLogger(__name__)

# One lock per resolved log path, shared by every writer in the process
_LOCKS: Dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path, threading.Lock())


class RegistrationLog:
    """
    Durable, append-only record log with one JSON object per line.

    Records are never rewritten or removed. Appends are serialized so each
    record lands as a complete line even under concurrent submissions.
    """

    def __init__(self, log_file: str):
        """Initialize the log.

        Args:
            log_file: Path to the JSON-lines file
        """
        self.path = Path(log_file)
        self._lock = _lock_for(self.path.resolve())

    def append(self, record: RegistrationRecord) -> None:
        """
        Append a record and flush it to disk.

        Args:
            record: Registration record to persist

        Raises:
            RecordStoreError: If the record cannot be serialized or written
        """
        try:
            line = record.to_json_line()
        except (TypeError, ValueError) as e:
            raise RecordStoreError(f"Registration record is not JSON serializable: {e}")

        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, 'a', encoding='utf-8') as f:
                    f.write(line)
                    f.flush()
            except OSError as e:
                logger.error(f"Error appending registration to {self.path}: {e}")
                raise RecordStoreError(f"Could not write registration log {self.path}: {e}")

        logger.info(f"Registration saved to {self.path}")
