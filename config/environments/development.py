"""
Development environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class DevelopmentConfig(AppConfig):
    """Local runs: verbose logs, debug sidebar tools, marked title"""

    def __post_init__(self):
        self.environment = "development"
        self.debug = True

        self.logging.level = "DEBUG"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/dev-app.log"
        self.logging.backup_count = 1

        self.ui.app_title = "🧪 Nova (DEV)"
        self.ui.app_subtitle = "Simulated replies, local session state only"


def get_development_config() -> DevelopmentConfig:
    return DevelopmentConfig()
