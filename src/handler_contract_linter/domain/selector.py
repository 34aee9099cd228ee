"""First-failure diagnostic selection over the handler rule set."""

from collections.abc import Mapping, Sequence
from typing import Optional

from handler_contract_linter.domain.registry_types import RuleRegistryEntry
from handler_contract_linter.domain.rule_msgs import RuleMsgBuilder
from handler_contract_linter.domain.rules import Diagnostic, SignatureRule
from handler_contract_linter.domain.signature import SignatureModel


class DiagnosticSelector:
    """
    Evaluates rules in priority order and keeps only the first violation.

    Deterministic and side-effect free: the same model always selects the
    same diagnostic. Rules that come after the first failure are not
    consulted.
    """

    def __init__(
        self,
        rules: Sequence[SignatureRule],
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self._rules = tuple(rules)
        self._registry = registry

    @property
    def rules(self) -> tuple[SignatureRule, ...]:
        return self._rules

    def select(self, model: SignatureModel) -> Optional[Diagnostic]:
        """Return the diagnostic of the first violated rule, or None."""
        for rule in self._rules:
            if rule.passes(model):
                continue
            args = rule.message_args(model)
            return Diagnostic(
                code=rule.code,
                symbol=rule.symbol,
                message=RuleMsgBuilder.render(self._registry, rule.code, args),
                span=rule.violation_span(model),
                message_args=args,
                handler_name=model.name,
            )
        return None
