"""
Provider/model selector - which responder identity labels the next reply.
"""

from typing import List, Optional

from config.app_config import ModelEntry, ProviderConfig, ProviderEntry
from utils.logging_config import get_logger


class ProviderSelector:
    """
    Tracks the chosen provider and model.
    Unknown identifiers fall back to the first entry rather than failing.
    """

    def __init__(self, config: ProviderConfig):
        if not config.providers:
            raise ValueError("Provider catalogue is empty")
        self.logger = get_logger(__name__)
        self.config = config
        self._provider = self._find_provider(config.default_provider_id) or config.providers[0]
        self._model = self._provider.models[0]

    @property
    def providers(self) -> List[ProviderEntry]:
        return list(self.config.providers)

    @property
    def provider(self) -> ProviderEntry:
        return self._provider

    @property
    def model(self) -> ModelEntry:
        return self._model

    def select_provider(self, provider_id: str) -> ProviderEntry:
        """Switch provider, keeping the current model only if the new provider offers it"""
        provider = self._find_provider(provider_id)
        if provider is None:
            self.logger.warning(f"Unknown provider '{provider_id}', using {self.config.providers[0].id}")
            provider = self.config.providers[0]

        self._provider = provider
        if not any(model.id == self._model.id for model in provider.models):
            self._model = provider.models[0]
        return provider

    def select_model(self, model_id: str) -> ModelEntry:
        model = next((entry for entry in self._provider.models if entry.id == model_id), None)
        if model is None:
            self.logger.warning(f"Model '{model_id}' not offered by {self._provider.id}")
            model = self._provider.models[0]
        self._model = model
        return model

    def summary(self) -> str:
        return f"{self._provider.label} • {self._model.label}"

    def _find_provider(self, provider_id: str) -> Optional[ProviderEntry]:
        return next((entry for entry in self.config.providers if entry.id == provider_id), None)
