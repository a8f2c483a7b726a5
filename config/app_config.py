"""
Unified Configuration System for Nova Chat

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    """Read an integer override from the environment, ignoring malformed values"""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class ChatConfig:
    """Chat session behaviour"""
    reply_delay_ms: int = field(default_factory=lambda: _env_int("NOVA_REPLY_DELAY_MS", 600))
    copy_feedback_ms: int = field(default_factory=lambda: _env_int("NOVA_COPY_FEEDBACK_MS", 2000))
    preview_limit: int = 80
    default_group_label: str = "Today"
    recent_timestamp: str = "Just now"
    untitled_title: str = "Untitled chat"
    new_chat_preview: str = "Say hello to Nova to get started."
    assistant_name: str = "Nova"
    assistant_avatar: str = "NO"
    user_name: str = "You"
    user_avatar: str = "YO"


@dataclass
class ModelEntry:
    """Model offered by a provider"""
    id: str
    label: str


@dataclass
class ProviderEntry:
    """Provider and the models it offers"""
    id: str
    label: str
    models: List[ModelEntry] = field(default_factory=list)


@dataclass
class ProviderConfig:
    """Provider/model picker configuration"""
    providers: List[ProviderEntry] = field(default_factory=lambda: [
        ProviderEntry("openai", "OpenAI", [
            ModelEntry("gpt-4o", "GPT-4o"),
            ModelEntry("gpt-4o-mini", "GPT-4o mini"),
            ModelEntry("o3-mini", "O3 mini"),
        ]),
        ProviderEntry("anthropic", "Anthropic", [
            ModelEntry("claude-3.7-sonnet", "Claude 3.7 Sonnet"),
            ModelEntry("claude-3.5-haiku", "Claude 3.5 Haiku"),
        ]),
        ProviderEntry("google", "Google Gemini", [
            ModelEntry("gemini-2.0-flash", "Gemini 2.0 Flash"),
            ModelEntry("gemini-1.5-pro", "Gemini 1.5 Pro"),
        ]),
        ProviderEntry("groq", "Groq", [
            ModelEntry("llama-3.1-70b", "Llama 3.1 70B"),
            ModelEntry("mixtral-8x7b", "Mixtral 8x7B"),
        ]),
    ])
    default_provider_id: str = "openai"

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the catalogue for display and debugging"""
        return {
            provider.id: [model.id for model in provider.models]
            for provider in self.providers
        }


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "Nova"
    app_subtitle: str = "Multi-provider chat playground"
    sidebar_caption: str = "Recent conversations"
    upload_types: List[str] = field(default_factory=lambda: ["png", "jpg", "jpeg", "gif", "webp"])
    composer_placeholder: str = "Ask Nova anything..."


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


@dataclass
class AppConfig:
    """Main application configuration"""
    chat: ChatConfig = field(default_factory=ChatConfig)
    providers: ProviderConfig = field(default_factory=ProviderConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        config = cls()

        # Apply environment-specific overrides
        if config.environment == "production":
            config.debug = False
            config.logging.level = "WARNING"
        elif config.environment == "development":
            config.debug = True
            config.logging.level = "DEBUG"

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.chat.reply_delay_ms < 0:
            errors.append("Reply delay must not be negative")
        if self.chat.copy_feedback_ms < 0:
            errors.append("Copy feedback duration must not be negative")
        if self.chat.preview_limit <= 0:
            errors.append("Preview limit must be positive")

        if not self.providers.providers:
            errors.append("At least one provider is required")
        for provider in self.providers.providers:
            if not provider.models:
                errors.append(f"Provider '{provider.id}' has no models")

        provider_ids = [provider.id for provider in self.providers.providers]
        if self.providers.providers and self.providers.default_provider_id not in provider_ids:
            errors.append(f"Default provider '{self.providers.default_provider_id}' is not configured")

        if self.logging.backup_count < 0:
            errors.append("Log backup count must not be negative")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        from config.environments import get_environment_config
        _config = get_environment_config()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()
