"""
Registration submission: persist first, then notify.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from company_formation.core.exceptions import ValidationError
from company_formation.core.models import RegistrationRecord
from company_formation.notifications.brevo import BrevoEmailClient
from company_formation.notifications.formatter import format_registration_summary, registration_subject
from company_formation.registration.store import RegistrationLog


logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _has_non_finite(value: Any) -> bool:
    """True if value holds NaN or an infinity at any depth."""
    if isinstance(value, float):
        return math.isnan(value) or math.isinf(value)
    if isinstance(value, Mapping):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(v) for v in value)
    return False


class RegistrationRecorder:
    """
    Record a registration and notify the formation team.

    The log is the source of truth: the record is written before any email
    is attempted, and a failed email still leaves the record in place.
    Identical submissions are stored as separate records.
    """

    def __init__(self, log: RegistrationLog, notifier: BrevoEmailClient,
                 clock: Callable[[], str] = utc_timestamp):
        """
        Initialize the recorder.

        Args:
            log: Append-only registration log
            notifier: Email client used to send the summary
            clock: Source of record timestamps
        """
        self.log = log
        self.notifier = notifier
        self.clock = clock

    def submit(self, payload: Any) -> RegistrationRecord:
        """
        Persist a registration and send the summary email.

        Args:
            payload: Decoded registration body

        Returns:
            The persisted RegistrationRecord

        Raises:
            ValidationError: If the payload is not a JSON object
                or holds a non-finite number
            RecordStoreError: If the record cannot be written
            NotificationError: If the email is rejected (record already saved)
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Registration data must be a JSON object")
        if _has_non_finite(payload):
            raise ValidationError("Registration data must not contain NaN or Infinity")

        record = RegistrationRecord(fields=dict(payload), timestamp=self.clock())
        self.log.append(record)

        summary = format_registration_summary(record.fields, submitted_at=record.timestamp)
        self.notifier.send(registration_subject(record.fields), summary)

        return record
