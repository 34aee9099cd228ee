"""Handler contract checks (E9501-E9507)."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

from astroid import nodes

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from handler_contract_linter.domain.constants import ALL_CODES
from handler_contract_linter.domain.registry_types import RuleRegistryEntry
from handler_contract_linter.domain.rule_msgs import RuleMsgBuilder
from handler_contract_linter.interface.emitters import PylintDiagnosticEmitter
from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase


class HandlerContractChecker(BaseChecker):
    """E9501-E9507: handler contract enforcement. Thin: delegates to HandlerAnalysisUseCase."""

    name: str = "handler-contract"
    CODES = ALL_CODES

    def __init__(
        self,
        linter: "PyLinter",
        analysis: HandlerAnalysisUseCase,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs_for_codes(
            registry, self.CODES)  # type: ignore[assignment]
        super().__init__(linter)
        self._analysis = analysis
        self._emitter = PylintDiagnosticEmitter(self)
        self._router_handlers: set[int] = set()

    def visit_module(self, node: nodes.Module) -> None:
        """Handlers are reported once per module, however many routers mount them."""
        self._router_handlers = set()

    def visit_functiondef(self, node: nodes.FunctionDef) -> None:
        """Analyze functions annotated with a handler decorator."""
        self._check_target(node)

    visit_asyncfunctiondef = visit_functiondef

    def visit_classdef(self, node: nodes.ClassDef) -> None:
        """A handler decorator on a class is a malformed annotation."""
        self._check_target(node)

    def visit_call(self, node: nodes.Call) -> None:
        """Analyze every handler registered in a ``debug_router(...)`` expression."""
        if not self._analysis.is_router_marker(node):
            return
        for finding in self._analysis.analyze_router(node, self._router_handlers):
            self._emitter.emit(finding.diagnostic, finding.node)

    def _check_target(self, node: nodes.NodeNG) -> None:
        if not self._analysis.is_handler_target(node):
            return
        finding = self._analysis.analyze_target(node)
        if finding is not None:
            self._emitter.emit(finding.diagnostic, finding.node)
