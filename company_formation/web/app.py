"""
Flask application exposing the company formation HTTP API.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, Response, jsonify, request

from company_formation.core.config import Config
from company_formation.core.exceptions import (
    RecordStoreError,
    SignatureVerificationError,
    UpstreamServiceError,
    ValidationError,
)
from company_formation.core.models import NameQuery
from company_formation.notifications.brevo import BrevoEmailClient
from company_formation.payments.intents import PaymentIntentIssuer
from company_formation.payments.webhooks import WebhookHandler
from company_formation.registration.recorder import RegistrationRecorder
from company_formation.registration.store import RegistrationLog
from company_formation.registry.availability import NameAvailabilityChecker
from company_formation.registry.client import CompaniesHouseClient, DEFAULT_BASE_URL as CH_BASE_URL
from company_formation.sic.catalog import SicCatalog


logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Collaborators behind the HTTP routes."""
    name_checker: NameAvailabilityChecker
    sic_catalog: SicCatalog
    payment_issuer: PaymentIntentIssuer
    webhook_handler: WebhookHandler
    recorder: RegistrationRecorder


def build_services(config: Config) -> Services:
    """Assemble the service graph from configuration.

    Args:
        config: Loaded application configuration

    Returns:
        Services ready to be attached to the app
    """
    ch = config.companies_house_config
    registry_client = CompaniesHouseClient(
        api_key=ch.get('api_key', ''),
        base_url=ch.get('base_url', CH_BASE_URL),
        timeout=ch.get('timeout', 30),
    )

    brevo = config.brevo_config
    notifier = BrevoEmailClient(
        api_key=brevo.get('api_key', ''),
        sender_email=config.get('brevo.sender.email', ''),
        sender_name=config.get('brevo.sender.name', 'Company Registration'),
        recipients=brevo.get('recipients', []),
        timeout=brevo.get('timeout', 30),
    )

    stripe_config = config.stripe_config
    return Services(
        name_checker=NameAvailabilityChecker(registry_client),
        sic_catalog=SicCatalog.from_file(config.sic_codes_config.get('data_file')),
        payment_issuer=PaymentIntentIssuer(stripe_config.get('secret_key', '')),
        webhook_handler=WebhookHandler(stripe_config.get('webhook_secret', '')),
        recorder=RegistrationRecorder(
            RegistrationLog(config.registrations_config.get('log_file', 'registrations.json')),
            notifier,
        ),
    )


def _error(message: str, status: int) -> Response:
    response = jsonify({'error': message})
    response.status_code = status
    return response


def create_app(services: Optional[Services] = None, config: Optional[Config] = None) -> Flask:
    """Create the Flask application.

    Args:
        services: Pre-built collaborators (built from config when omitted)
        config: Configuration used to build services

    Returns:
        Configured Flask app
    """
    if services is None:
        services = build_services(config or Config())

    app = Flask(__name__)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'OK', 'timestamp': datetime.now(timezone.utc).isoformat()})

    @app.route('/check-name', methods=['POST'])
    def check_name():
        body = request.get_json(force=True, silent=True)
        try:
            query = NameQuery.from_payload(body)
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            result = services.name_checker.check(query)
        except UpstreamServiceError as e:
            logger.error(f"Error checking company name: {e}")
            return _error('Could not check company name.', 500)

        return jsonify(result.to_dict())

    @app.route('/create-payment-intent', methods=['POST'])
    def create_payment_intent():
        try:
            result = services.payment_issuer.create_intent()
        except UpstreamServiceError as e:
            logger.error(f"Stripe Error: {e}")
            return _error('Could not create payment intent.', 500)

        return jsonify(result.to_dict())

    @app.route('/submit-registration', methods=['POST'])
    def submit_registration():
        body = request.get_json(force=True, silent=True)
        try:
            services.recorder.submit(body)
        except ValidationError as e:
            return _error(str(e), 400)
        except (RecordStoreError, UpstreamServiceError) as e:
            logger.error(f"Error submitting registration: {e}")
            return _error('Could not submit registration', 500)

        return jsonify({'success': True, 'message': 'Registration submitted successfully'})

    @app.route('/stripe-webhook', methods=['POST'])
    def stripe_webhook():
        # Signature covers the exact bytes sent, so the body is read unparsed
        payload = request.get_data(cache=False)
        signature = request.headers.get('Stripe-Signature')

        try:
            services.webhook_handler.process(payload, signature)
        except SignatureVerificationError as e:
            return Response(f"Webhook Error: {e}", status=400, mimetype='text/plain')

        return jsonify({'received': True})

    @app.route('/api/sic-codes/search', methods=['GET'])
    def search_sic_codes():
        results = services.sic_catalog.search(request.args.get('q', ''))
        return jsonify([sic.to_dict() for sic in results])

    return app
