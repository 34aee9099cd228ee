"""Domain models for handler contract rules and diagnostics."""

from dataclasses import dataclass

__all__ = [
    "Diagnostic",
    "SignatureRule",
]

from typing import Protocol

from handler_contract_linter.domain.signature import SignatureModel, SourceSpan


@dataclass(frozen=True)
class Diagnostic:
    """A single contract violation: which rule, what it says, where it points."""

    code: str
    symbol: str
    message: str
    span: SourceSpan
    message_args: tuple[str, ...] = ()
    handler_name: str = ""
    """Name of the analyzed handler, for reporters that aggregate."""


class SignatureRule(Protocol):
    """
    One necessary condition of the handler contract.

    Rules are stateless and total: any SignatureModel is valid input, whatever
    other rules concluded about it. ``violation_span`` and ``message_args`` are
    only meaningful when ``passes`` returned False.
    """

    code: str
    symbol: str
    description: str

    def passes(self, model: SignatureModel) -> bool:
        """Return True when the model satisfies this rule."""
        ...

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        """Return the span of the smallest element responsible for the violation."""
        ...

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        """Return the arguments interpolated into the rule's message template."""
        ...
