"""
Brevo transactional email client for registration notifications.
"""

import logging
import requests
from typing import List, Optional

from company_formation.core.exceptions import NotificationError


DEFAULT_BASE_URL = "https://api.brevo.com/v3"


class BrevoEmailClient:
    """
    Send plaintext emails to a fixed recipient list through Brevo.

    Delivery is attempted once; failures are raised to the caller.
    """

    def __init__(self, api_key: str, sender_email: str, recipients: List[str],
                 sender_name: str = "Company Registration",
                 base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = 30):
        """
        Initialize the Brevo client.

        Args:
            api_key: Brevo API key
            sender_email: Verified sender address
            recipients: Addresses that receive every notification
            sender_name: Display name of the sender
            base_url: API root URL
            timeout: Request timeout in seconds (None waits indefinitely)

        Raises:
            ValueError: If the API key or recipients are missing
        """
        if not api_key or not api_key.strip():
            raise ValueError(
                "Brevo API key is required. "
                "Please set the BREVO_API_KEY environment variable."
            )
        if not recipients:
            raise ValueError("At least one notification recipient is required")

        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.recipients = list(recipients)
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def send(self, subject: str, text_content: str) -> Optional[str]:
        """
        Send an email to every configured recipient.

        Args:
            subject: Email subject line
            text_content: Plaintext body

        Returns:
            Brevo message id, if one was returned

        Raises:
            NotificationError: For network errors or rejected requests
        """
        payload = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": address} for address in self.recipients],
            "subject": subject,
            "textContent": text_content,
        }
        headers = {
            "api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            response = requests.post(f"{self.base_url}/smtp/email", json=payload,
                                     headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Email sending error: {e}")
            raise NotificationError(f"Network error sending email: {e}")

        if not 200 <= response.status_code < 300:
            self.logger.error(f"Email sending error: {response.status_code} {response.text}")
            raise NotificationError(
                f"Email API request failed with status {response.status_code}: {response.text}"
            )

        try:
            message_id = response.json().get("messageId")
        except (ValueError, AttributeError):
            message_id = None

        self.logger.info(f"Email sent successfully via Brevo API. Message ID: {message_id}")
        return message_id
