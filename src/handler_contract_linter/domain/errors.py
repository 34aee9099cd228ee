"""Exception hierarchy for handler-contract-linter."""

from typing import Optional


class HandlerLintError(Exception):
    """Base class for all handler-contract-linter errors."""


class SignatureBuildError(HandlerLintError):
    """The annotated node is not a function-like declaration."""

    def __init__(self, message: str, node: Optional[object] = None) -> None:
        super().__init__(message)
        self.node = node


class ConfigurationError(HandlerLintError, ValueError):
    """A [tool.handler-lint] value has the wrong shape."""


class ServiceCapabilityError(HandlerLintError, TypeError):
    """A service value does not satisfy the router's capability bounds."""

    def __init__(self, service: object, bound: str, detail: str) -> None:
        self.service = service
        self.bound = bound
        super().__init__(
            f"the capability bound `{bound}` is not satisfied for `{type(service).__qualname__}`: {detail}"
        )
