"""GuidanceService: loads the rule registry and provides messages and manual instructions."""

from pathlib import Path
from typing import cast

import yaml

from handler_contract_linter.domain.constants import RULE_PRIORITY, REGISTRY_PREFIX
from handler_contract_linter.domain.registry_types import RuleRegistryEntry
from handler_contract_linter.domain.rule_msgs import RuleMsgBuilder


class GuidanceService:
    """Loads rule_registry.yaml and answers registry lookups."""

    def __init__(self, registry_path: str | None = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        with open(self._path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        self._registry = (
            cast(dict[str, RuleRegistryEntry], data) if isinstance(data, dict) else {}
        )

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry for use by domain/use_cases."""
        return dict(self._registry)

    def get_entry(self, rule_code: str) -> RuleRegistryEntry | None:
        """Return the full registry entry for a rule by code or symbol."""
        return RuleMsgBuilder.get_entry(self._registry, rule_code)

    def get_manual_instructions(self, rule_code: str) -> str:
        entry = self.get_entry(rule_code)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"])
        return "Fix the handler signature at the reported location."

    def list_rules(self) -> list[tuple[str, RuleRegistryEntry]]:
        """Return (code, entry) pairs: contract rules in priority order, then the rest."""
        codes = [rid[len(REGISTRY_PREFIX):] for rid in self._registry if rid.startswith(REGISTRY_PREFIX)]
        ordered = [c for c in RULE_PRIORITY if c in codes] + sorted(c for c in codes if c not in RULE_PRIORITY)
        return [(code, self._registry[f"{REGISTRY_PREFIX}{code}"]) for code in ordered]
