"""Pure message-building from a registry dict. No I/O or infrastructure imports."""

from collections.abc import Mapping
from typing import cast

from handler_contract_linter.domain.constants import REGISTRY_PREFIX
from handler_contract_linter.domain.registry_types import RuleRegistryEntry


class RuleMsgBuilder:
    """Builds Pylint msgs dicts and rendered messages from a registry mapping."""

    @staticmethod
    def get_entry(
        registry: Mapping[str, RuleRegistryEntry], rule_code: str
    ) -> RuleRegistryEntry | None:
        """Return registry entry for a rule by code or symbol (public API)."""
        rule_id = f"{REGISTRY_PREFIX}{rule_code}"
        entry = registry.get(rule_id)
        if isinstance(entry, dict):
            return cast(RuleRegistryEntry, dict(entry))
        for rid, e in registry.items():
            if not rid.startswith(REGISTRY_PREFIX):
                continue
            if isinstance(e, dict) and e.get("symbol") == rule_code:
                return cast(RuleRegistryEntry, dict(e))
        return None

    @staticmethod
    def build_msgs_for_codes(
        registry: Mapping[str, RuleRegistryEntry], codes: list[str]
    ) -> dict[str, tuple[str, str, str]]:
        """Build Pylint msgs dict from a registry mapping for given rule codes.

        Registry keys are e.g. 'handler-lint.E9501'; values are RuleRegistryEntry dicts.
        Returns { code: (message_template, symbol, description) } for checker.msgs.
        """
        result: dict[str, tuple[str, str, str]] = {}
        for code in codes:
            entry = RuleMsgBuilder.get_entry(registry, code)
            if entry and entry.get("message_template"):
                msg = entry["message_template"]
                symbol = entry.get("symbol") or code
                desc = (
                    entry.get("short_description")
                    or entry.get("display_name")
                    or code
                )
                result[code] = (str(msg), str(symbol), str(desc))
        return result

    @staticmethod
    def render(
        registry: Mapping[str, RuleRegistryEntry], rule_code: str, args: tuple[str, ...]
    ) -> str:
        """Interpolate a rule's message template the way pylint does (``template % args``)."""
        entry = RuleMsgBuilder.get_entry(registry, rule_code)
        template = entry.get("message_template") if entry else None
        if not template:
            return rule_code
        if not args:
            return str(template)
        return str(template) % args
