"""
Stripe PaymentIntent issuing for registration fees.
"""

import logging
import stripe

from company_formation.core.exceptions import PaymentProviderError
from company_formation.core.models import PaymentIntentRequest, PaymentIntentResult


logger = logging.getLogger(__name__)

REGISTRATION_FEE = PaymentIntentRequest()


class PaymentIntentIssuer:
    """
    Create PaymentIntents for the fixed registration fee.

    The amount and currency never come from the client. No idempotency key
    is sent, so every call creates a distinct intent.
    """

    def __init__(self, secret_key: str, fee: PaymentIntentRequest = REGISTRATION_FEE):
        """
        Initialize the issuer.

        Args:
            secret_key: Stripe secret API key
            fee: Server-side payment parameters

        Raises:
            ValueError: If the secret key is not provided
        """
        if not secret_key or not secret_key.strip():
            raise ValueError(
                "Stripe secret key is required. "
                "Please set the STRIPE_SECRET_KEY environment variable."
            )
        self.secret_key = secret_key
        self.fee = fee

    def create_intent(self) -> PaymentIntentResult:
        """
        Create a PaymentIntent and return its client secret.

        Returns:
            PaymentIntentResult holding only the client secret

        Raises:
            PaymentProviderError: If Stripe rejects the request
        """
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.secret_key,
                amount=self.fee.amount,
                currency=self.fee.currency,
                automatic_payment_methods={'enabled': self.fee.automatic_payment_methods},
            )
        except stripe.StripeError as e:
            raise PaymentProviderError(f"Stripe error creating payment intent: {e}")

        logger.info(f"Created payment intent {intent.id} for {self.fee.display_amount}")
        return PaymentIntentResult(client_secret=intent.client_secret)
