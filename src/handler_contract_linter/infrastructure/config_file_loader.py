"""Load [tool.handler-lint] from pyproject.toml. Infrastructure I/O only."""

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

CONFIG_SECTION = "handler-lint"


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml."""

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Walk up from ``start`` (default: CWD) and return [tool.handler-lint], or {}."""
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.is_file():
                continue
            with config_file.open("rb") as f:
                data = toml_lib.load(f)
            tool_section = data.get("tool", {}) or {}
            return dict(tool_section.get(CONFIG_SECTION, {}) or {})
        return {}
