"""Builds SearchBoxEngine instances from environment configuration."""

from collections.abc import Sequence
from typing import Any

from config.config import Config
from orchestrator.engine import SearchBoxEngine
from orchestrator.fan_out import SuggestionFanOut
from orchestrator.navigation import Navigator
from orchestrator.submission import SearchCallback
from providers.enhancement_client import HttpQueryEnhancementService, QueryEnhancementService
from providers.registry import ProviderRegistry
from utils.logger import get_logger

logger = get_logger(__name__)


def build_enhancement_service(config: Config) -> QueryEnhancementService | None:
    if not config.ENABLE_QUERY_ENHANCEMENT or not config.ENHANCEMENT_SERVICE_URL:
        return None
    return HttpQueryEnhancementService(
        config.ENHANCEMENT_SERVICE_URL,
        api_key=config.ENHANCEMENT_API_KEY,
        timeout_s=config.ENHANCEMENT_TIMEOUT_S,
    )


class EngineFactory:
    """
    Shares one provider set, settings and enhancement client between engines.

    Example usage:
        factory = EngineFactory.from_config(Config())
        engine = factory.create(on_search=print)
    """

    def __init__(
        self,
        config: Config,
        providers: Sequence[Any],
        enhancement_service: QueryEnhancementService | None = None,
    ):
        self.config = config
        self.settings = config.engine_settings()
        self.providers = list(providers)
        self.enhancement_service = enhancement_service
        self.fan_out = SuggestionFanOut(default_timeout_s=self.settings.provider_timeout_s)

    @classmethod
    def from_config(cls, config: Config | None = None) -> "EngineFactory":
        config = config or Config()
        registry = ProviderRegistry.from_yaml(config.SUGGESTION_PROVIDERS_FILE)
        providers = registry.providers()
        logger.info(
            "Loaded suggestion providers",
            extra={
                "extra_fields": {
                    "providers": [p.name for p in providers],
                    "enabled": [p.name for p in registry.enabled_providers()],
                }
            },
        )
        return cls(config, providers, build_enhancement_service(config))

    def create(
        self,
        *,
        navigator: Navigator | None = None,
        on_search: SearchCallback | None = None,
        initial_input_value: str | None = None,
    ) -> SearchBoxEngine:
        return SearchBoxEngine(
            self.settings,
            self.providers,
            on_search=on_search,
            navigator=navigator,
            enhancement_service=self.enhancement_service,
            fan_out=self.fan_out,
            initial_input_value=initial_input_value,
        )
