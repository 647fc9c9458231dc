"""Configuration management for the company formation backend."""

import os
import logging
import yaml
from typing import Dict, Any
from dotenv import load_dotenv

from company_formation.core.exceptions import ConfigurationError


logger = logging.getLogger('company_formation')

# Provider keys that must be present before the service can start
REQUIRED_KEYS = {
    'companies_house.api_key': 'COMPANIES_HOUSE_API_KEY',
    'stripe.secret_key': 'STRIPE_SECRET_KEY',
    'stripe.webhook_secret': 'STRIPE_WEBHOOK_SECRET',
    'brevo.api_key': 'BREVO_API_KEY',
}


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        dotenv_path = os.path.join(os.getcwd(), '.env')
        if load_dotenv():
            logger.info(f"Environment variables loaded from .env file: {dotenv_path}")

        self.config_path = config_path
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file) or {}
            return self._process_env_variables(config)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML configuration: {e}")

    def _process_env_variables(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Process environment variable placeholders in configuration.

        ``${VAR}`` requires the variable to be set; ``${VAR:-default}``
        falls back to ``default`` when it is not.
        """
        def process_value(value):
            if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                env_var, sep, default = value[2:-1].partition(':-')
                env_value = os.getenv(env_var)
                if env_value is None:
                    if sep:
                        return default
                    raise ValueError(f"Environment variable not set: {env_var}")
                return env_value
            elif isinstance(value, dict):
                return {k: process_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [process_value(item) for item in value]
            return value

        return process_value(config)  # type: ignore

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'stripe.secret_key')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def companies_house_config(self) -> Dict[str, Any]:
        """Get Companies House configuration section."""
        return self._config.get('companies_house', {})

    @property
    def stripe_config(self) -> Dict[str, Any]:
        """Get Stripe configuration section."""
        return self._config.get('stripe', {})

    @property
    def brevo_config(self) -> Dict[str, Any]:
        """Get Brevo email configuration section."""
        return self._config.get('brevo', {})

    @property
    def registrations_config(self) -> Dict[str, Any]:
        """Get registration log configuration section."""
        return self._config.get('registrations', {})

    @property
    def sic_codes_config(self) -> Dict[str, Any]:
        """Get SIC code catalog configuration section."""
        return self._config.get('sic_codes', {})

    @property
    def server_config(self) -> Dict[str, Any]:
        """Get HTTP server configuration section."""
        return self._config.get('server', {})

    @property
    def logging_config(self) -> Dict[str, Any]:
        """Get logging configuration section."""
        return self._config.get('logging', {})

    def get_all(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary.

        Returns:
            Complete configuration dictionary
        """
        return self._config.copy()

    def validate(self) -> bool:
        """Validate configuration completeness.

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        required_sections = ['companies_house', 'stripe', 'brevo', 'registrations', 'logging']

        for section in required_sections:
            if section not in self._config:
                raise ConfigurationError(f"Missing configuration section: {section}")

        for key_path, env_var in REQUIRED_KEYS.items():
            value = self.get(key_path)
            if not value or not str(value).strip():
                raise ConfigurationError(
                    f"{key_path} is required but not configured. "
                    f"Please set the {env_var} environment variable."
                )

        recipients = self.get('brevo.recipients', [])
        if not recipients:
            raise ConfigurationError("At least one notification recipient is required")

        if not self.get('brevo.sender.email'):
            raise ConfigurationError("Notification sender email is required")

        if not self.get('registrations.log_file'):
            raise ConfigurationError("Registration log file path is required")

        return True
