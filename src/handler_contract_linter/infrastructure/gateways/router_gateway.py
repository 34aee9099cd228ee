"""Discovers handler registration sites inside router-building expressions."""

import logging
from dataclasses import dataclass
from typing import Optional

from astroid import nodes

from handler_contract_linter.domain.constants import METHOD_ROUTERS, ROUTE_METHODS
from handler_contract_linter.infrastructure.gateways.astroid_gateway import AstroidGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationSite:
    """A handler reference inside a router expression, and what it resolves to."""

    reference: nodes.NodeNG
    handler: Optional[nodes.NodeNG]

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.reference.lineno or 0, self.reference.col_offset or 0)


class RouterGateway:
    """
    Walks a router expression and returns its handler registrations in source order.

    Recognized shapes: ``get(h)`` and the other method routers (also chained,
    ``get(a).post(b)``), ``router.route(path, h)`` with a handler or a named method router
    and ``router.fallback(h)``. A name used as the router is followed back to
    the assignments that reach it, so ``app = app.route(...)`` chains are seen
    in full.
    """

    def __init__(self, ast_gateway: AstroidGateway) -> None:
        self._ast = ast_gateway

    def registration_sites(self, marker_call: nodes.Call) -> list[RegistrationSite]:
        """Return registrations of the router passed to a marker call like ``debug_router(app)``."""
        if not marker_call.args:
            return []
        references: dict[int, nodes.NodeNG] = {}
        self._collect(marker_call.args[0], references, visited=set())
        sites = [
            RegistrationSite(reference=ref, handler=self._ast.resolve_callable(ref))
            for ref in references.values()
        ]
        for site in sites:
            if site.handler is None:
                logger.debug("Skipping unresolved handler reference %s", site.reference.as_string())
        return sorted(sites, key=lambda s: s.sort_key)

    def _collect(self, expr: nodes.NodeNG, references: dict[int, nodes.NodeNG], visited: set[int]) -> None:
        if id(expr) in visited:
            return
        visited.add(id(expr))

        if isinstance(expr, nodes.Name):
            for value in self._ast.assigned_values(expr):
                self._collect(value, references, visited)
            return

        for call in expr.nodes_of_class(nodes.Call, skip_klass=(nodes.Lambda, nodes.FunctionDef)):
            self._collect_call(call, references, visited)

    def _collect_call(self, call: nodes.Call, references: dict[int, nodes.NodeNG], visited: set[int]) -> None:
        name = self._ast.get_call_name(call)
        if name in METHOD_ROUTERS and call.args:
            self._add_reference(call.args[0], references)
        elif name in ROUTE_METHODS and isinstance(call.func, nodes.Attribute) and call.args:
            handler = call.args[-1]
            if isinstance(handler, nodes.Name):
                # Either a handler or a method router such as ``r = get(show)``.
                self._collect(handler, references, visited)
                if self._ast.resolve_callable(handler) is not None:
                    self._add_reference(handler, references)
            elif isinstance(handler, (nodes.Attribute, nodes.Lambda)):
                self._add_reference(handler, references)
        # The receiver of a chained call may be a router built in an earlier statement.
        if isinstance(call.func, nodes.Attribute) and isinstance(call.func.expr, nodes.Name):
            self._collect(call.func.expr, references, visited)

    @staticmethod
    def _add_reference(node: nodes.NodeNG, references: dict[int, nodes.NodeNG]) -> None:
        if isinstance(node, (nodes.Name, nodes.Attribute, nodes.Lambda)):
            references.setdefault(id(node), node)
