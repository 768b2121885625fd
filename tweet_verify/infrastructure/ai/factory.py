"""Registry that builds and owns the language model providers."""

import logging
from typing import Dict, Optional, Type

from ...domain.ports.ai_provider import AIProvider
from .chatgpt_adapter import ChatGPTAdapter, ChatGPTConfig

logger = logging.getLogger(__name__)


class AIProviderFactory:
    """Builds providers on first use and shuts them all down together."""

    def __init__(self, chatgpt_config: Optional[ChatGPTConfig] = None):
        self._chatgpt_config = chatgpt_config or ChatGPTConfig(api_key="")
        self._providers: Dict[str, Type[AIProvider]] = {"chatgpt": ChatGPTAdapter}
        self._instances: Dict[str, AIProvider] = {}

    def register_provider(self, name: str, provider_class: Type[AIProvider]) -> None:
        self._providers[name] = provider_class

    async def create_provider(self, name: str, **kwargs) -> AIProvider:
        """Return the initialized provider called ``name``, building it once.

        The ChatGPT provider takes ``kwargs`` as overrides of the factory's
        ChatGPT settings; other providers receive them as constructor arguments.

        Raises:
            ValueError: If no provider is registered under ``name``
        """
        if name in self._instances:
            return self._instances[name]
        provider_class = self._providers.get(name)
        if provider_class is None:
            raise ValueError(f"Provider '{name}' not found")

        if provider_class is ChatGPTAdapter:
            provider = provider_class(config=self._chatgpt_config.model_copy(update=kwargs))
        else:
            provider = provider_class(**kwargs)

        await provider.initialize()
        self._instances[name] = provider
        logger.info(f"✅ AI provider ready: {name} ({provider.provider_name})")
        return provider

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Registered provider names mapped to whether they are initialized."""
        return {name: name in self._instances for name in self._providers}

    async def shutdown(self) -> None:
        for name, provider in self._instances.items():
            await provider.shutdown()
            logger.info(f"🛑 AI provider stopped: {name}")
        self._instances.clear()
