"""Plaintext summary of a submitted registration."""

import json
from typing import Any, Mapping, Optional

from company_formation.core.models import PaymentIntentRequest


PLACEHOLDER = 'N/A'
FEE = PaymentIntentRequest()


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(data: Mapping[str, Any], key: str, default: str = PLACEHOLDER) -> str:
    value = data.get(key)
    if _missing(value):
        return default
    if isinstance(value, (list, tuple)):
        return ', '.join(str(item) for item in value)
    return str(value)


def _block(data: Mapping[str, Any], key: str) -> str:
    """Structured fields (directors, shareholders, PSCs) as indented JSON."""
    value = data.get(key)
    if _missing(value):
        return PLACEHOLDER
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def registration_subject(data: Mapping[str, Any]) -> str:
    return f"New Company Registration: {_text(data, 'companyName')}"


def format_registration_summary(data: Mapping[str, Any], submitted_at: Optional[str] = None) -> str:
    """Render the fixed-layout summary sent to the formation team.

    Every section is always present; absent values render as ``N/A`` or
    the field's stated default so the layout never changes.

    Args:
        data: Submitted registration fields
        submitted_at: Record timestamp

    Returns:
        Plaintext email body
    """
    contact_email = _text(data, 'contact_email', default=_text(data, 'email'))

    lines = [
        "NEW UK COMPANY REGISTRATION",
        "===========================",
        "",
        "COMPANY DETAILS:",
        f"- Company Name: {_text(data, 'companyName')}",
        f"- Company Type: {_text(data, 'companyType', default='Private company limited by shares')}",
        f"- SIC Codes: {_text(data, 'sic_codes')}",
        "",
        "REGISTERED OFFICE ADDRESS:",
        _text(data, 'address_line1'),
        _text(data, 'address_line2', default=''),
        f"{_text(data, 'city')}, {_text(data, 'county', default='')}",
        _text(data, 'postcode'),
        _text(data, 'country', default='United Kingdom'),
        "",
        "DIRECTORS:",
        _block(data, 'directors'),
        "",
        "SHAREHOLDERS:",
        _block(data, 'shareholders'),
        f"Total Share Capital: {_text(data, 'total_share_capital')}",
        "",
        "PERSONS WITH SIGNIFICANT CONTROL (PSC):",
        _block(data, 'pscs'),
        "",
        "CONTACT INFORMATION:",
        f"- Email: {contact_email}",
        f"- Phone: {_text(data, 'contact_phone')}",
        "",
        "ARTICLES OF ASSOCIATION:",
        _text(data, 'articles_type', default='Model Articles'),
        "",
        "PAYMENT:",
        f"- Amount: {FEE.display_amount}",
        f"- Payment ID: {_text(data, 'payment_id')}",
        "",
        f"Submitted at: {submitted_at or PLACEHOLDER}",
    ]
    return '\n'.join(lines) + '\n'
