"""Handler analysis pipeline: build model -> select first violation, per handler and per router."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from astroid import nodes

from handler_contract_linter.domain.config import ConfigurationLoader
from handler_contract_linter.domain.constants import CODE_MALFORMED, CODE_ROUTER
from handler_contract_linter.domain.errors import SignatureBuildError
from handler_contract_linter.domain.registry_types import RuleRegistryEntry
from handler_contract_linter.domain.rule_msgs import RuleMsgBuilder
from handler_contract_linter.domain.rules import Diagnostic
from handler_contract_linter.domain.selector import DiagnosticSelector
from handler_contract_linter.domain.signature import SourceSpan
from handler_contract_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from handler_contract_linter.infrastructure.gateways.router_gateway import RouterGateway
from handler_contract_linter.infrastructure.gateways.signature_builder import (
    AstroidSignatureBuilder,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerFinding:
    """A diagnostic and the node it is reported on."""

    node: nodes.NodeNG
    diagnostic: Diagnostic


class HandlerAnalysisUseCase:
    """
    Runs the handler contract over annotated functions and router expressions.

    Holds no state between calls: every analysis builds its own model and
    returns its own findings.
    """

    def __init__(
        self,
        builder: AstroidSignatureBuilder,
        selector: DiagnosticSelector,
        ast_gateway: AstroidGateway,
        router_gateway: RouterGateway,
        config_loader: ConfigurationLoader,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self._builder = builder
        self._selector = selector
        self._ast = ast_gateway
        self._router_gateway = router_gateway
        self._config_loader = config_loader
        self._registry = registry

    def is_handler_target(self, node: nodes.NodeNG) -> bool:
        """True if the node carries a handler annotation (``@debug_handler``)."""
        markers = self._config_loader.handler_decorators
        return any(name in markers for name in self._ast.decorator_names(node))

    def is_router_marker(self, node: nodes.Call) -> bool:
        """True for ``debug_router(...)`` style calls."""
        return self._ast.get_call_name(node) in self._config_loader.router_markers

    def analyze(self, node: nodes.NodeNG) -> Optional[Diagnostic]:
        """Return the first contract violation of a function-like node, or None.

        Raises SignatureBuildError for nodes that are not function-like.
        """
        model = self._builder.build(node)
        return self._selector.select(model)

    def analyze_target(self, node: nodes.NodeNG) -> Optional[HandlerFinding]:
        """Analyze an annotated node; a non-function target becomes E9506."""
        try:
            diagnostic = self.analyze(node)
        except SignatureBuildError as exc:
            return HandlerFinding(node=node, diagnostic=self._malformed(node, exc))
        if diagnostic is None:
            return None
        return HandlerFinding(node=node, diagnostic=diagnostic)

    def analyze_router(
        self, marker_call: nodes.Call, seen: Optional[set[int]] = None
    ) -> list[HandlerFinding]:
        """
        Analyze every handler registered in the router passed to ``marker_call``.

        One finding per failing handler, in registration order. Handlers that
        carry their own handler annotation are skipped since they are reported
        at their definition. ``seen`` holds the ids of handlers already
        analyzed; share one set across the routers of a module so a handler
        mounted in several routers is reported once.
        """
        findings: list[HandlerFinding] = []
        if seen is None:
            seen = set()
        module = marker_call.root()
        for site in self._router_gateway.registration_sites(marker_call):
            handler = site.handler
            if handler is None or id(handler) in seen:
                continue
            seen.add(id(handler))
            if self.is_handler_target(handler):
                continue
            diagnostic = self.analyze(handler)
            if diagnostic is None:
                continue
            if handler.root() is module:
                findings.append(HandlerFinding(node=handler, diagnostic=diagnostic))
            else:
                findings.append(
                    HandlerFinding(node=site.reference, diagnostic=self._at_registration(site.reference, diagnostic))
                )
        logger.debug("Router at line %s: %d failing handler(s)", marker_call.lineno, len(findings))
        return findings

    def analyze_module(self, module: nodes.Module) -> list[HandlerFinding]:
        """All findings of a module in source order: annotated targets, then router batches."""
        findings: list[HandlerFinding] = []
        for node in module.nodes_of_class((nodes.FunctionDef, nodes.ClassDef)):
            if not self.is_handler_target(node):
                continue
            finding = self.analyze_target(node)
            if finding is not None:
                findings.append(finding)
        seen: set[int] = set()
        for call in module.nodes_of_class(nodes.Call):
            if self.is_router_marker(call):
                findings.extend(self.analyze_router(call, seen))
        return sorted(findings, key=lambda f: (f.diagnostic.span.line, f.diagnostic.span.column))

    def _malformed(self, node: nodes.NodeNG, exc: SignatureBuildError) -> Diagnostic:
        span = SourceSpan.keyword(node, "class") if isinstance(node, nodes.ClassDef) else SourceSpan.from_node(node)
        args = (str(exc),)
        return Diagnostic(
            code=CODE_MALFORMED,
            symbol=self._symbol(CODE_MALFORMED),
            message=RuleMsgBuilder.render(self._registry, CODE_MALFORMED, args),
            span=span,
            message_args=args,
            handler_name=getattr(node, "name", ""),
        )

    def _at_registration(self, reference: nodes.NodeNG, diagnostic: Diagnostic) -> Diagnostic:
        args = (diagnostic.handler_name, diagnostic.message)
        return Diagnostic(
            code=CODE_ROUTER,
            symbol=self._symbol(CODE_ROUTER),
            message=RuleMsgBuilder.render(self._registry, CODE_ROUTER, args),
            span=SourceSpan.from_node(reference),
            message_args=args,
            handler_name=diagnostic.handler_name,
        )

    def _symbol(self, code: str) -> str:
        entry = RuleMsgBuilder.get_entry(self._registry, code)
        return str(entry.get("symbol", code)) if entry else code
