"""UK Company Formation Backend

HTTP backend for a UK company-registration flow: company name availability,
SIC code lookup, Stripe payments and registration notifications.
"""

__version__ = "0.1.0"
__description__ = "Company formation backend for UK registrations"
