"""
Stripe webhook verification and event handling.
"""

import logging
from typing import Optional, Union

import stripe

from company_formation.core.exceptions import SignatureVerificationError
from company_formation.core.models import WebhookEvent


logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


class WebhookHandler:
    """
    Verify signed Stripe events and react to successful payments.

    An event moves from unverified to either verified or rejected. Rejected
    payloads are never parsed into events or acted upon. Unknown event
    types are acknowledged without action.
    """

    def __init__(self, webhook_secret: str,
                 tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE):
        """
        Initialize the handler.

        Args:
            webhook_secret: Endpoint signing secret (whsec_...)
            tolerance: Maximum accepted signature age in seconds

        Raises:
            ValueError: If the signing secret is not provided
        """
        if not webhook_secret or not webhook_secret.strip():
            raise ValueError(
                "Stripe webhook secret is required. "
                "Please set the STRIPE_WEBHOOK_SECRET environment variable."
            )
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    def verify(self, payload: Union[bytes, str], signature: Optional[str]) -> WebhookEvent:
        """
        Verify a raw webhook body against its Stripe-Signature header.

        Args:
            payload: Raw, unparsed request body
            signature: Value of the Stripe-Signature header

        Returns:
            The verified WebhookEvent

        Raises:
            SignatureVerificationError: If the header is missing, the
                signature does not match or the payload is not valid JSON
        """
        if not signature:
            raise SignatureVerificationError("No signatures found matching the expected signature for payload")

        if isinstance(payload, bytes):
            try:
                payload = payload.decode('utf-8')
            except UnicodeDecodeError as e:
                raise SignatureVerificationError(f"Payload is not valid UTF-8: {e}")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret,
                                                   tolerance=self.tolerance)
        except stripe.SignatureVerificationError as e:
            raise SignatureVerificationError(str(e))
        except ValueError as e:
            raise SignatureVerificationError(f"Invalid payload: {e}")
        except (AttributeError, TypeError):
            # Signed JSON that is not an object cannot be built into an event
            raise SignatureVerificationError("Invalid payload: event must be a JSON object")

        return WebhookEvent.from_dict(event.to_dict())

    def handle(self, event: WebhookEvent) -> None:
        """
        React to a verified event.

        Args:
            event: Verified webhook event
        """
        if event.type == PAYMENT_SUCCEEDED:
            payment_intent = event.data_object
            amount = payment_intent.get('amount')
            intent_id = payment_intent.get('id', 'unknown')
            if isinstance(amount, int) and not isinstance(amount, bool):
                logger.info(f"Payment for £{amount / 100:.2f} succeeded! (payment intent {intent_id})")
            else:
                logger.info(f"Payment succeeded (payment intent {intent_id}, amount not reported)")
        else:
            logger.debug(f"Ignoring webhook event type {event.type}")

    def process(self, payload: Union[bytes, str], signature: Optional[str]) -> WebhookEvent:
        """Verify then handle a webhook delivery.

        Raises:
            SignatureVerificationError: If verification fails
        """
        try:
            event = self.verify(payload, signature)
        except SignatureVerificationError as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise

        self.handle(event)
        return event
