"""
Environment-specific configurations, selected by APP_ENV
"""

import os
from typing import Callable, Dict

from config.app_config import AppConfig


def _registry() -> Dict[str, Callable[[], AppConfig]]:
    from .development import get_development_config
    from .production import get_production_config

    return {
        "development": get_development_config,
        "production": get_production_config,
    }


def get_environment_config() -> AppConfig:
    """
    Get configuration for the current APP_ENV

    'development' and 'production' have dedicated overrides; any other
    value loads the base configuration.
    """
    env = os.getenv("APP_ENV", "development").lower()
    factory = _registry().get(env)
    if factory is None:
        return AppConfig.load()
    return factory()
