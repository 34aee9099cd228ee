"""Loads the packaged type classification table (type_registry.yaml)."""

from pathlib import Path

import yaml

from handler_contract_linter.domain.type_registry import TypeRegistry


class TypeTableService:
    """Reads recognized extractor / special argument / response names from YAML."""

    def __init__(self, table_path: str | None = None) -> None:
        if table_path is not None:
            self._path = Path(table_path)
        else:
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "type_registry.yaml"

    def load(self) -> TypeRegistry:
        with open(self._path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return TypeRegistry()
        # YAML reads a bare None entry as null; the table means the None type.
        cleaned = {
            key: ["None" if name is None else str(name) for name in (names or [])]
            for key, names in data.items()
        }
        return TypeRegistry.from_mapping(cleaned)
