"""Data models for the company formation backend."""

import json
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from company_formation.core.exceptions import ValidationError


@dataclass
class NameQuery:
    """A proposed company name submitted for an availability check."""
    company_name: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'NameQuery':
        """Create NameQuery from a decoded JSON request body.

        Args:
            payload: Decoded request body (expected to be a dict)

        Returns:
            NameQuery instance

        Raises:
            ValidationError: If companyName is missing, blank or not a string
        """
        name = payload.get('companyName') if isinstance(payload, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Company name is required")
        return cls(company_name=name)


@dataclass
class RegistryCandidate:
    """A company record returned by the registry search."""
    title: str
    company_number: Optional[str] = None
    company_status: Optional[str] = None


@dataclass
class AvailabilityResult:
    """Outcome of a name availability check."""
    available: bool
    suggestions: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate the suggestions invariant."""
        if self.available and self.suggestions:
            raise ValueError("An available name cannot carry suggestions")
        if not self.available and not self.suggestions:
            raise ValueError("An unavailable name must carry suggestions")

    def to_dict(self) -> Dict[str, Any]:
        return {'available': self.available, 'suggestions': list(self.suggestions)}


@dataclass(frozen=True)
class PaymentIntentRequest:
    """Server-fixed parameters of a registration payment."""
    amount: int = 11400  # pence
    currency: str = 'gbp'
    automatic_payment_methods: bool = True

    @property
    def display_amount(self) -> str:
        return f"£{self.amount / 100:.2f}"


@dataclass
class PaymentIntentResult:
    """Client secret handed back to the browser to complete payment."""
    client_secret: str

    def to_dict(self) -> Dict[str, Any]:
        return {'clientSecret': self.client_secret}


@dataclass
class WebhookEvent:
    """A verified event pushed by the payment provider."""
    type: str
    data: Dict[str, Any]
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, body: Dict[str, Any]) -> 'WebhookEvent':
        data = body.get('data')
        return cls(
            type=str(body.get('type', '')),
            data=data if isinstance(data, dict) else {},
            id=body.get('id'),
        )

    @property
    def data_object(self) -> Dict[str, Any]:
        """The resource the event is about (e.g. the PaymentIntent)."""
        obj = self.data.get('object')
        return obj if isinstance(obj, dict) else {}


@dataclass
class RegistrationRecord:
    """A submitted registration plus its server-assigned timestamp.

    The submitted fields are kept as-is; the record is append-only and is
    never mutated after it has been written.
    """
    fields: Dict[str, Any]
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        record = dict(self.fields)
        record['timestamp'] = self.timestamp
        return record

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False) + '\n'


@dataclass(frozen=True)
class SicCode:
    """A standard industrial classification code."""
    code: str
    description: str

    def __post_init__(self):
        if not self.code:
            raise ValueError("SIC code cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        return {'code': self.code, 'description': self.description}
