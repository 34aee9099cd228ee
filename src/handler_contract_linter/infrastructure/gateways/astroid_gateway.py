"""AST gateway: parsing, name resolution and decorator discovery on astroid trees."""

import logging
from typing import Optional

import astroid
from astroid import nodes

logger = logging.getLogger(__name__)


class AstroidGateway:
    """Thin, inference-aware helpers over astroid nodes."""

    def parse_file(self, file_path: str) -> nodes.Module:
        """Parse a file and return the astroid Module node."""
        return astroid.MANAGER.ast_from_file(file_path, source=True)

    def get_call_name(self, node: nodes.Call) -> Optional[str]:
        """Return the called name: ``get`` for ``get(h)`` and ``route`` for ``app.route(...)``."""
        func = node.func
        if isinstance(func, nodes.Name):
            return func.name
        if isinstance(func, nodes.Attribute):
            return func.attrname
        return None

    def decorator_names(self, node: nodes.NodeNG) -> list[str]:
        """
        Return the last dotted segment of every decorator.

        ``@debug_handler``, ``@lint.debug_handler`` and ``@debug_handler()`` all
        yield ``debug_handler``.
        """
        decorators = getattr(node, "decorators", None)
        if decorators is None:
            return []
        names: list[str] = []
        for decorator in decorators.nodes:
            target = decorator.func if isinstance(decorator, nodes.Call) else decorator
            if isinstance(target, nodes.Name):
                names.append(target.name)
            elif isinstance(target, nodes.Attribute):
                names.append(target.attrname)
        return names

    def resolve_callable(self, node: nodes.NodeNG) -> Optional[nodes.NodeNG]:
        """
        Resolve a handler reference to the FunctionDef or Lambda it names.

        Local lookup first (cheap, no inference), then astroid inference for
        imports and attribute access. Returns None when nothing function-like
        can be found.
        """
        if isinstance(node, nodes.Lambda):
            return node
        if isinstance(node, nodes.Name):
            _, assignments = node.lookup(node.name)
            functions = [a for a in assignments if isinstance(a, nodes.FunctionDef)]
            if functions and len(functions) == len(assignments):
                return functions[-1]
        try:
            for inferred in node.infer():
                if inferred is astroid.Uninferable:
                    continue
                if isinstance(inferred, (nodes.FunctionDef, nodes.Lambda)):
                    return inferred
        except (astroid.InferenceError, AttributeError):
            logger.debug("Could not infer handler reference %s", node.as_string())
        return None

    def assigned_values(self, node: nodes.Name) -> list[nodes.NodeNG]:
        """Return the expressions assigned to ``node``'s name that reach ``node``."""
        _, assignments = node.lookup(node.name)
        values: list[nodes.NodeNG] = []
        for assignment in assignments:
            parent = assignment.parent
            if isinstance(parent, (nodes.Assign, nodes.AnnAssign)) and parent.value is not None:
                values.append(parent.value)
        return values
