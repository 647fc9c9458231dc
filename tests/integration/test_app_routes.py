import hashlib
import hmac
import json
import logging
import time
import pytest
import yaml
from datetime import datetime
from unittest.mock import Mock

from company_formation.core.config import Config
from company_formation.core.exceptions import PaymentProviderError, RegistryAPIError
from company_formation.core.models import PaymentIntentResult, RegistryCandidate, SicCode
from company_formation.payments.intents import PaymentIntentIssuer
from company_formation.payments.webhooks import WebhookHandler
from company_formation.registration.recorder import RegistrationRecorder
from company_formation.registry.availability import NameAvailabilityChecker
from company_formation.registry.client import CompaniesHouseClient
from company_formation.sic.catalog import SicCatalog
from company_formation.web.app import Services, build_services, create_app


WEBHOOK_SECRET = "whsec_route_test"


def sign(payload: str, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signature = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


class TestAppRoutes:
    """Integration tests for the HTTP routes with mocked providers."""

    @pytest.fixture
    def registry(self):
        registry = Mock(spec=CompaniesHouseClient)
        registry.search_companies.return_value = []
        return registry

    @pytest.fixture
    def payment_issuer(self):
        issuer = Mock(spec=PaymentIntentIssuer)
        issuer.create_intent.return_value = PaymentIntentResult(client_secret="pi_1_secret_2")
        return issuer

    @pytest.fixture
    def recorder(self):
        return Mock(spec=RegistrationRecorder)

    @pytest.fixture
    def client(self, registry, payment_issuer, recorder):
        services = Services(
            name_checker=NameAvailabilityChecker(registry),
            sic_catalog=SicCatalog([
                SicCode("62012", "Business and domestic software development"),
                SicCode("58290", "Other software publishing"),
                SicCode("56101", "Licensed restaurants"),
            ]),
            payment_issuer=payment_issuer,
            webhook_handler=WebhookHandler(webhook_secret=WEBHOOK_SECRET),
            recorder=recorder,
        )
        app = create_app(services=services)
        app.config['TESTING'] = True
        return app.test_client()

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'OK'
        datetime.fromisoformat(body['timestamp'])

    def test_check_name_available(self, client, registry):
        registry.search_companies.return_value = [RegistryCandidate(title="ACME WIDGET CO LTD")]

        response = client.post('/check-name', json={'companyName': 'Acme Widgets'})

        assert response.status_code == 200
        assert response.get_json() == {'available': True, 'suggestions': []}

    def test_check_name_taken(self, client, registry):
        registry.search_companies.return_value = [RegistryCandidate(title="ACME WIDGETS LIMITED")]

        response = client.post('/check-name', json={'companyName': 'Acme Widgets'})

        assert response.status_code == 200
        assert response.get_json() == {
            'available': False,
            'suggestions': ['Acme Widgets UK', 'Acme Widgets Solutions', 'Acme Widgets Group',
                            'Acme Widgets Holdings', 'Acme Widgets Services'],
        }

    @pytest.mark.parametrize("body", [{}, {'companyName': ''}, {'companyName': None}])
    def test_check_name_missing(self, client, registry, body):
        response = client.post('/check-name', json=body)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Company name is required'}
        registry.search_companies.assert_not_called()

    def test_check_name_without_body(self, client, registry):
        response = client.post('/check-name')

        assert response.status_code == 400
        registry.search_companies.assert_not_called()

    def test_check_name_registry_failure(self, client, registry):
        registry.search_companies.side_effect = RegistryAPIError("401 Unauthorized: key ch_secret")

        response = client.post('/check-name', json={'companyName': 'Acme'})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Could not check company name.'}
        assert 'ch_secret' not in response.get_data(as_text=True)

    def test_create_payment_intent(self, client, payment_issuer):
        response = client.post('/create-payment-intent', json={'amount': 1})

        assert response.status_code == 200
        assert response.get_json() == {'clientSecret': 'pi_1_secret_2'}
        payment_issuer.create_intent.assert_called_once_with()

    def test_create_payment_intent_failure(self, client, payment_issuer):
        payment_issuer.create_intent.side_effect = PaymentProviderError("No such API key: sk_live_x")

        response = client.post('/create-payment-intent')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Could not create payment intent.'}

    def test_sic_search(self, client):
        response = client.get('/api/sic-codes/search?q=Software')

        assert response.status_code == 200
        assert response.get_json() == [
            {'code': '62012', 'description': 'Business and domestic software development'},
            {'code': '58290', 'description': 'Other software publishing'},
        ]

    @pytest.mark.parametrize("url", ['/api/sic-codes/search', '/api/sic-codes/search?q=',
                                     '/api/sic-codes/search?q=s'])
    def test_sic_search_short_query(self, client, url):
        response = client.get(url)

        assert response.status_code == 200
        assert response.get_json() == []

    def test_webhook_payment_succeeded(self, client, caplog):
        payload = json.dumps({
            'id': 'evt_1', 'type': 'payment_intent.succeeded',
            'data': {'object': {'id': 'pi_1', 'amount': 11400}},
        })

        with caplog.at_level(logging.INFO, logger='company_formation'):
            response = client.post('/stripe-webhook', data=payload,
                                   headers={'Stripe-Signature': sign(payload)},
                                   content_type='application/json')

        assert response.status_code == 200
        assert response.get_json() == {'received': True}
        assert 'Payment for £114.00 succeeded' in caplog.text

    def test_webhook_other_event(self, client):
        payload = json.dumps({'id': 'evt_2', 'type': 'charge.refunded', 'data': {'object': {}}})

        response = client.post('/stripe-webhook', data=payload,
                               headers={'Stripe-Signature': sign(payload)},
                               content_type='application/json')

        assert response.status_code == 200
        assert response.get_json() == {'received': True}

    @pytest.mark.parametrize("body", [
        {'type': 'payment_intent.succeeded', 'data': [1]},
        {'id': 'evt_4', 'type': 'payment_intent.succeeded',
         'data': {'object': {'id': 'pi_1', 'amount': '11400'}}},
        {'id': 'evt_5', 'type': 'payment_intent.succeeded', 'data': {'object': 'pi_1'}},
    ])
    def test_webhook_succeeded_with_unexpected_shape(self, client, caplog, body):
        payload = json.dumps(body)

        with caplog.at_level(logging.INFO, logger='company_formation'):
            response = client.post('/stripe-webhook', data=payload,
                                   headers={'Stripe-Signature': sign(payload)},
                                   content_type='application/json')

        assert response.status_code == 200
        assert response.get_json() == {'received': True}
        assert 'amount not reported' in caplog.text

    def test_webhook_signed_non_object(self, client):
        payload = json.dumps([1, 2])

        response = client.post('/stripe-webhook', data=payload,
                               headers={'Stripe-Signature': sign(payload)},
                               content_type='application/json')

        assert response.status_code == 400
        assert response.get_data(as_text=True).startswith('Webhook Error:')

    def test_webhook_invalid_signature(self, client, caplog):
        payload = json.dumps({
            'id': 'evt_3', 'type': 'payment_intent.succeeded',
            'data': {'object': {'id': 'pi_1', 'amount': 11400}},
        })

        with caplog.at_level(logging.INFO, logger='company_formation'):
            response = client.post('/stripe-webhook', data=payload,
                                   headers={'Stripe-Signature': sign(payload, secret='whsec_forged')},
                                   content_type='application/json')

        assert response.status_code == 400
        assert response.get_data(as_text=True).startswith('Webhook Error:')
        assert 'Payment for' not in caplog.text

    def test_webhook_missing_signature(self, client):
        response = client.post('/stripe-webhook', data='{}', content_type='application/json')

        assert response.status_code == 400

    def test_submit_registration(self, client, recorder):
        payload = {'companyName': 'Acme Widgets', 'payment_id': 'pi_1'}

        response = client.post('/submit-registration', json=payload)

        assert response.status_code == 200
        assert response.get_json() == {'success': True, 'message': 'Registration submitted successfully'}
        recorder.submit.assert_called_once_with(payload)


class TestBuildServices:
    """Test wiring services from configuration."""

    def test_build_from_config(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({
            'companies_house': {'api_key': 'ch_test_key', 'timeout': 5},
            'stripe': {'secret_key': 'sk_test_123', 'webhook_secret': 'whsec_123'},
            'brevo': {'api_key': 'xkeysib-123', 'sender': {'email': 'registrations@example.com'},
                      'recipients': ['formations@example.com']},
            'registrations': {'log_file': str(tmp_path / 'registrations.json')},
            'sic_codes': {'data_file': ''},
            'logging': {'level': 'INFO'},
        }))

        services = build_services(Config(str(config_path)))

        assert services.name_checker.registry_client.timeout == 5
        assert len(services.sic_catalog) > 100
        assert services.payment_issuer.secret_key == 'sk_test_123'
        assert services.webhook_handler.webhook_secret == 'whsec_123'
        assert services.recorder.log.path == tmp_path / 'registrations.json'
        assert services.recorder.notifier.recipients == ['formations@example.com']

        app = create_app(services=services)
        assert app.test_client().get('/health').status_code == 200
