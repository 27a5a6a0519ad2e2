"""Dependency Injection Container."""

from injector import Injector, Module, ProviderOf, provider, singleton

from .config import Settings, get_settings
from .logging_config import configure_logging
from ..agents import AdjustmentAdvisor, AgentOrchestrator, LLMAdjustmentAdvisor, PromptComposer
from ..handlers import AgentHandler, ToolsHandler
from ..models import LLMProvider, ProviderConfig, ProviderLoader
from ..monitoring import MetricsCollector, metrics_collector
from ..surface import StructureValidator
from ..tools import ToolRegistry, ToolRouter, register_builtin_tools


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        return metrics_collector

    @singleton
    @provider
    def provide_tool_registry(self) -> ToolRegistry:
        """Provide the populated, frozen tool registry."""
        registry = ToolRegistry()
        register_builtin_tools(registry)
        registry.freeze()
        return registry

    @singleton
    @provider
    def provide_router(self, registry: ToolRegistry) -> ToolRouter:
        return ToolRouter(registry)

    @singleton
    @provider
    def provide_validator(self) -> StructureValidator:
        return StructureValidator(
            max_size=self.settings.max_surface_size,
            max_depth=self.settings.max_surface_depth,
            strict=self.settings.strict_contracts,
        )

    @singleton
    @provider
    def provide_llm(self) -> LLMProvider:
        """Provide the chat provider (raises LLMError when no API key is set)."""
        return ProviderLoader.load(ProviderConfig.from_settings(self.settings))

    @singleton
    @provider
    def provide_composer(self, registry: ToolRegistry) -> PromptComposer:
        return PromptComposer(tool_registry=registry, history_window=self.settings.history_window)

    @singleton
    @provider
    def provide_advisor(self, llm: LLMProvider, composer: PromptComposer) -> AdjustmentAdvisor:
        return LLMAdjustmentAdvisor(llm, composer)

    # Unscoped: one orchestrator per turn, so concurrent requests never share its state
    @provider
    def provide_orchestrator(
        self,
        llm: LLMProvider,
        composer: PromptComposer,
        router: ToolRouter,
        validator: StructureValidator,
        advisor: AdjustmentAdvisor,
        metrics: MetricsCollector,
    ) -> AgentOrchestrator:
        return AgentOrchestrator(
            provider=llm,
            composer=composer,
            router=router,
            validator=validator,
            advisor=advisor,
            max_retries=self.settings.agent_max_retries,
            metrics=metrics,
        )

    @singleton
    @provider
    def provide_agent_handler(self, orchestrators: ProviderOf[AgentOrchestrator]) -> AgentHandler:
        return AgentHandler(orchestrators.get)

    @singleton
    @provider
    def provide_tools_handler(self, router: ToolRouter, registry: ToolRegistry) -> ToolsHandler:
        return ToolsHandler(router, registry)


def create_container(settings: Settings | None = None) -> Injector:
    """Configure logging from settings and build the injector."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    return Injector([CoreModule(settings)])
