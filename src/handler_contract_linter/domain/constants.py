"""
Handler contract constants: rule codes, trigger names, registration shapes.
"""

# Rule registry keys are namespaced: "handler-lint.E9501"
REGISTRY_PREFIX: str = "handler-lint."

# Evaluation priority of the handler contract rules (first violated wins).
RULE_PRIORITY: tuple[str, ...] = ("E9501", "E9502", "E9503", "E9504", "E9505")

CODE_NOT_ASYNC: str = "E9501"
CODE_GENERATOR: str = "E9502"
CODE_ARGUMENT: str = "E9503"
CODE_BODY_ORDER: str = "E9504"
CODE_RETURN: str = "E9505"
CODE_MALFORMED: str = "E9506"
CODE_ROUTER: str = "E9507"

ALL_CODES: list[str] = [*RULE_PRIORITY, CODE_MALFORMED, CODE_ROUTER]

DEFAULT_HANDLER_DECORATORS: tuple[str, ...] = ("debug_handler",)
DEFAULT_ROUTER_MARKERS: tuple[str, ...] = ("debug_router",)

# Method-router constructors whose first positional argument is a handler.
METHOD_ROUTERS: frozenset[str] = frozenset(
    {"get", "post", "put", "delete", "patch", "head", "options", "trace", "any"}
)
# Router methods that take a handler (or a method router) as their last argument.
ROUTE_METHODS: frozenset[str] = frozenset({"route", "fallback"})

# Typing wrappers that are transparent to classification.
OPTIONAL_WRAPPERS: frozenset[str] = frozenset({"Optional"})
UNION_WRAPPERS: frozenset[str] = frozenset({"Union"})
ANNOTATED_WRAPPERS: frozenset[str] = frozenset({"Annotated"})
TUPLE_WRAPPERS: frozenset[str] = frozenset({"tuple", "Tuple"})

NONE_NAMES: frozenset[str] = frozenset({"None", "NoneType"})
