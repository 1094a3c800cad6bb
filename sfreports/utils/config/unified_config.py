"""Unified configuration system with clear precedence and secrets handling."""

import os
import json
from typing import Dict, Any, Optional, Union
from pathlib import Path

from .constants import DEFAULT_REPORT_LIST_LIMIT, DEFAULT_SALESFORCE_API_VERSION


# Logger is resolved lazily to avoid circular imports
logger = None

def _get_logger():
    """Lazy logger initialization to avoid circular imports."""
    global logger
    if logger is None:
        from ..logging import SmartLogger
        logger = SmartLogger("config")
    return logger


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


class UnifiedConfig:
    """Unified configuration with clear precedence:

    Precedence (highest to lowest):
    1. Environment variables
    2. system_config.json
    3. Code defaults

    Secrets are handled separately and only come from environment variables.
    """

    SECRET_MAPPINGS = {
        'salesforce_user': 'SFDC_USER',
        'salesforce_pass': 'SFDC_PASS',
        'salesforce_token': 'SFDC_TOKEN',
        'salesforce_domain': 'SFDC_DOMAIN',
    }

    ENV_MAPPINGS = {
        'SFDC_API_VERSION': 'salesforce.api_version',
        'REPORTS_LIST_LIMIT': 'reports.default_list_limit',
    }

    def __init__(self, config_file: str = "system_config.json"):
        self._config_file = config_file
        self._config = {}
        self._secrets = {}
        self._defaults = self._get_code_defaults()

        self._load_json_config()
        self._load_secrets()
        self._apply_env_overrides()

        _get_logger().info("unified_config_loaded",
                           config_file=config_file,
                           secrets_loaded=len(self._secrets),
                           config_sections=list(self._config.keys()))

    def _get_code_defaults(self) -> Dict[str, Any]:
        """Code defaults as fallback."""
        return {
            "salesforce": {
                "api_version": DEFAULT_SALESFORCE_API_VERSION,
            },
            "reports": {
                "default_list_limit": DEFAULT_REPORT_LIST_LIMIT,
            },
        }

    def _load_json_config(self):
        """Load configuration from JSON file, merged over the defaults."""
        config_path = Path(self._config_file)
        if not config_path.exists():
            _get_logger().debug("config_file_not_found",
                                path=str(config_path),
                                using_defaults=True)
            self._config = self._deep_merge(self._defaults, {})
            return

        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            _get_logger().error("config_file_load_error",
                                path=str(config_path),
                                error=str(e),
                                using_defaults=True)
            self._config = self._deep_merge(self._defaults, {})
            return

        self._config = self._deep_merge(self._defaults, file_config)
        _get_logger().info("config_file_loaded",
                           path=str(config_path),
                           sections=list(file_config.keys()))

    def _load_secrets(self):
        """Load sensitive values from environment only."""
        for key, env_var in self.SECRET_MAPPINGS.items():
            value = os.getenv(env_var)
            if value:
                self._secrets[key] = value

        _get_logger().info("secrets_loaded",
                           secret_count=len(self._secrets),
                           secret_keys=list(self._secrets.keys()))

    def _apply_env_overrides(self):
        """Apply environment variable overrides for non-sensitive config."""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value)
                self._set_nested_value(self._config, config_path, converted_value)
                _get_logger().debug("env_override_applied",
                                    env_var=env_var,
                                    config_path=config_path,
                                    value=converted_value)

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' not in value:
                return int(value)
        except ValueError:
            pass

        # Versions such as "59.0" stay strings
        return value

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries without mutating either."""
        result = {k: (self._deep_merge(v, {}) if isinstance(v, dict) else v)
                  for k, v in base.items()}

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _set_nested_value(self, config: Dict, path: str, value: Any):
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            path: Dot-separated path like 'reports.default_list_limit'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        current = self._config

        try:
            for key in path.split('.'):
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def get_secret(self, key: str, required: bool = True) -> Optional[str]:
        """Get secret value from environment.

        Raises:
            ConfigError: If required secret is missing
        """
        value = self._secrets.get(key)

        if value is None and required:
            raise ConfigError(f"Required secret '{key}' not found in environment variables")

        return value

    def has_secret(self, key: str) -> bool:
        """Check if secret exists without exposing value."""
        return key in self._secrets

    def validate_required_secrets(self, required_keys: list):
        missing = [key for key in required_keys if not self.has_secret(key)]

        if missing:
            raise ConfigError(f"Missing required secrets: {', '.join(missing)}")

    # Property shortcuts for common values
    @property
    def salesforce_api_version(self) -> str:
        return str(self.get('salesforce.api_version', DEFAULT_SALESFORCE_API_VERSION))

    @property
    def report_list_limit(self) -> int:
        return int(self.get('reports.default_list_limit', DEFAULT_REPORT_LIST_LIMIT))


# Singleton instance
config = UnifiedConfig()
