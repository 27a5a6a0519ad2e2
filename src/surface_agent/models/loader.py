"""Provider Loader - builds the configured chat provider."""

from typing import Optional

from ..core import get_logger
from .config import ProviderConfig
from .mistral import MistralClient

logger = get_logger(__name__)


class ProviderLoader:
    """Provider lifecycle manager."""

    _instance: Optional[MistralClient] = None

    @classmethod
    def load(cls, config: ProviderConfig) -> MistralClient:
        """
        Load provider with config.

        Raises:
            LLMError: MISSING_API_KEY when no key is configured
        """
        logger.info("loading", model=config.model_name)
        provider = MistralClient(config)
        cls._instance = provider
        return provider

    @classmethod
    def unload(cls) -> None:
        if cls._instance:
            logger.info("unloading")
            cls._instance.close()
            cls._instance = None
