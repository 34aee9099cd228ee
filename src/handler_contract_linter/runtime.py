"""
Runtime annotation surface.

``debug_handler`` and ``debug_router`` only mark code for the pylint plugin
and return their argument unchanged. ``check_service`` / ``debug_service``
assert the router's capability bounds on a service value; the assertions
live under ``__debug__`` and disappear with ``python -O``.

    from handler_contract_linter.runtime import debug_handler, debug_router

    @debug_handler
    async def index() -> str:
        return "Hello, world!"

    app = debug_router(Router().route("/", get(index)))
"""

import copy
import inspect
from typing import Any, Awaitable, Callable, Protocol, TypeVar

from handler_contract_linter.domain.errors import ServiceCapabilityError

F = TypeVar("F", bound=Callable[..., Any])
R = TypeVar("R")


class ServiceLike(Protocol):
    """Request in, awaitable response out."""

    def __call__(self, request: Any, /) -> Awaitable[Any]: ...


S = TypeVar("S", bound=ServiceLike)


def debug_handler(func: F) -> F:
    """Mark ``func`` for handler contract analysis. Identity at runtime."""
    return func


def debug_router(router: R) -> R:
    """Mark a router expression for aggregate handler analysis. Identity at runtime."""
    return router


def check_service(service: S) -> None:
    """
    Assert that ``service`` can be composed into a router.

    Bounds, checked in order: callable, cloneable (``copy.copy`` succeeds),
    and calling it yields an awaitable. Raises ServiceCapabilityError here,
    at the caller's line, rather than deep inside the router.
    """
    if __debug__:
        if not callable(service):
            raise ServiceCapabilityError(service, "Callable", "service values must be callable with a request")
        try:
            copy.copy(service)
        except (TypeError, copy.Error) as exc:
            raise ServiceCapabilityError(service, "Clone", f"copy.copy() failed: {exc}") from exc
        if not _is_async_callable(service):
            raise ServiceCapabilityError(service, "Awaitable", "calling the service must return an awaitable")


def debug_service(service: S) -> S:
    """Check ``service`` like ``check_service`` and return it unchanged."""
    check_service(service)
    return service


def _is_async_callable(service: object) -> bool:
    if inspect.iscoroutinefunction(service):
        return True
    call = getattr(type(service), "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)
