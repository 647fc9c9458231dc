"""
Custom exceptions for the company formation backend.
"""


class CompanyFormationError(Exception):
    """Base exception for all company formation backend errors."""
    pass


class ConfigurationError(CompanyFormationError):
    """Raised when there's an error in configuration loading or validation."""
    pass


class ValidationError(CompanyFormationError):
    """Raised when required client input is missing or malformed."""
    pass


class UpstreamServiceError(CompanyFormationError):
    """Raised when an external provider call fails."""
    pass


class RegistryAPIError(UpstreamServiceError):
    """Raised when there's an error with the Companies House search API."""
    pass


class PaymentProviderError(UpstreamServiceError):
    """Raised when Stripe rejects or fails a request."""
    pass


class NotificationError(UpstreamServiceError):
    """Raised when the transactional email API fails to accept a message."""
    pass


class SignatureVerificationError(CompanyFormationError):
    """Raised when an inbound webhook cannot be verified."""
    pass


class RecordStoreError(CompanyFormationError):
    """Raised when a registration record cannot be appended to the log."""
    pass
