"""
Test environment-specific configurations
"""

from config.app_config import AppConfig
from config.environments import get_environment_config
from config.environments.development import get_development_config
from config.environments.production import get_production_config


class TestEnvironmentConfigs:
    """Test environment-specific configuration loading"""

    def test_development_config(self):
        """Test development configuration"""
        config = get_development_config()

        assert config.environment == "development"
        assert config.debug == True
        assert config.logging.level == "DEBUG"
        assert config.logging.log_file == "logs/dev-app.log"
        assert config.logging.backup_count == 1
        assert "DEV" in config.ui.app_title

    def test_production_config(self):
        """Test production configuration"""
        config = get_production_config()

        assert config.environment == "production"
        assert config.debug == False
        assert config.logging.level == "INFO"
        assert "DEV" not in config.ui.app_title
        assert config.logging.backup_count == 10
        assert config.logging.max_bytes == 50 * 1024 * 1024

    def test_environment_selection_development(self, monkeypatch):
        """Test environment selection for development"""
        monkeypatch.setenv("APP_ENV", "development")
        config = get_environment_config()

        assert config.environment == "development"
        assert config.debug == True

    def test_environment_selection_production(self, monkeypatch):
        """Test environment selection for production"""
        monkeypatch.setenv("APP_ENV", "PRODUCTION")
        config = get_environment_config()

        assert config.environment == "production"
        assert config.debug == False

    def test_default_environment(self, monkeypatch):
        """Test default environment when APP_ENV is not set"""
        monkeypatch.delenv("APP_ENV", raising=False)
        config = get_environment_config()

        # Should default to development
        assert config.environment == "development"

    def test_unknown_environment_uses_base_config(self, monkeypatch):
        """Test unrecognised environments load the base configuration"""
        monkeypatch.setenv("APP_ENV", "staging")
        config = get_environment_config()

        assert type(config) is AppConfig
        assert config.environment == "staging"

    def test_config_validation(self, tmp_path):
        """Test that all environment configs pass validation"""
        configs = [
            get_development_config(),
            get_production_config()
        ]

        for config in configs:
            config.logging.log_file = str(tmp_path / "app.log")
            assert config.validate() == []
