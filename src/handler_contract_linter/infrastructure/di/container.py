from typing import Any, Optional, TypeVar, cast

from handler_contract_linter.domain.config import ConfigurationLoader
from handler_contract_linter.domain.rules.handler_rules import HandlerRuleSet
from handler_contract_linter.domain.selector import DiagnosticSelector
from handler_contract_linter.domain.type_registry import TypeClassifier
from handler_contract_linter.infrastructure.config_file_loader import ConfigFileLoader
from handler_contract_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from handler_contract_linter.infrastructure.gateways.router_gateway import RouterGateway
from handler_contract_linter.infrastructure.gateways.signature_builder import (
    AstroidSignatureBuilder,
)
from handler_contract_linter.infrastructure.services.guidance_service import GuidanceService
from handler_contract_linter.infrastructure.services.type_table import TypeTableService
from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase

T = TypeVar("T")


class HandlerLintContainer:
    """Dependency Injection Container for the handler contract linter."""

    def __init__(self, config_loader: Optional[ConfigurationLoader] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_loader)

    def _register_defaults(self, config_loader: Optional[ConfigurationLoader]) -> None:
        """Register default implementations."""
        if config_loader is None:
            config_loader = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
        self.register_singleton("ConfigurationLoader", config_loader)

        guidance = GuidanceService()
        self.register_singleton("GuidanceService", guidance)

        type_registry = TypeTableService().load().extend(config_loader.extra_types())
        classifier = TypeClassifier(type_registry)
        self.register_singleton("TypeClassifier", classifier)

        registry = guidance.get_registry()
        selector = DiagnosticSelector(HandlerRuleSet.default(classifier), registry)
        self.register_singleton("DiagnosticSelector", selector)

        ast_gateway = AstroidGateway()
        self.register_singleton("AstroidGateway", ast_gateway)
        self.register_singleton(
            "HandlerAnalysisUseCase",
            HandlerAnalysisUseCase(
                builder=AstroidSignatureBuilder(),
                selector=selector,
                ast_gateway=ast_gateway,
                router_gateway=RouterGateway(ast_gateway),
                config_loader=config_loader,
                registry=registry,
            ),
        )

    def register_singleton(self, key: str, instance: Any) -> None:
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        if key not in self._singletons:
            raise KeyError(f"No registration for {key!r}")
        return self._singletons[key]

    def get_typed(self, key: str, _type: type[T]) -> T:
        return cast(T, self.get(key))

    def get_config_loader(self) -> ConfigurationLoader:
        return self.get_typed("ConfigurationLoader", ConfigurationLoader)

    def get_guidance_service(self) -> GuidanceService:
        return self.get_typed("GuidanceService", GuidanceService)

    def get_selector(self) -> DiagnosticSelector:
        return self.get_typed("DiagnosticSelector", DiagnosticSelector)

    def get_astroid_gateway(self) -> AstroidGateway:
        return self.get_typed("AstroidGateway", AstroidGateway)

    def get_analysis(self) -> HandlerAnalysisUseCase:
        return self.get_typed("HandlerAnalysisUseCase", HandlerAnalysisUseCase)
