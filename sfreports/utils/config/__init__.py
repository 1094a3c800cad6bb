"""Unified configuration for the Salesforce reports tooling."""

from .unified_config import UnifiedConfig, ConfigError, config

# Star import acceptable for config constants
from .constants import *  # noqa: F403

__all__ = [
    'UnifiedConfig',
    'ConfigError',
    'config',
]
