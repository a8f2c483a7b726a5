"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class ProductionConfig(AppConfig):
    """Deployed app: JSON logs at INFO, no debug tools"""

    def __post_init__(self):
        self.environment = "production"
        self.debug = False

        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"
        self.logging.max_bytes = 50 * 1024 * 1024
        self.logging.backup_count = 10

        self.ui.app_title = "Nova"


def get_production_config() -> ProductionConfig:
    return ProductionConfig()
