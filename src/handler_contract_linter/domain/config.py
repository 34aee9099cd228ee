"""Configuration for linter settings. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging

from handler_contract_linter.domain.constants import (
    DEFAULT_HANDLER_DECORATORS,
    DEFAULT_ROUTER_MARKERS,
)
from handler_contract_linter.domain.errors import ConfigurationError
from handler_contract_linter.domain.type_registry import TypeRegistry

logger = logging.getLogger(__name__)

_LIST_KEYS: tuple[str, ...] = (
    "extractors",
    "body_extractors",
    "special_arguments",
    "response_types",
    "handler_decorators",
    "router_markers",
)


class ConfigurationLoader:
    """
    Immutable configuration read from [tool.handler-lint].

    Created by Infrastructure. Domain does not read the filesystem;
    Infrastructure calls ConfigFileLoader.load_config_from_fs() and constructs
    ConfigurationLoader(config_dict) at the composition root.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        self._config: dict[str, object] = dict(config_dict or {})
        if self._config:
            self.validate_config(self._config)

    def validate_config(self, config: dict[str, object]) -> None:
        """Reject wrongly shaped values; warn about keys nobody reads."""
        for key in _LIST_KEYS:
            value = config.get(key)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(
                    f"[tool.handler-lint] '{key}' must be a list of strings, got {value!r}"
                )
        unknown = sorted(set(config) - set(_LIST_KEYS))
        if unknown:
            logger.warning("Configuration Warning: unknown [tool.handler-lint] keys: %s", ", ".join(unknown))

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    def _names(self, key: str) -> list[str]:
        raw = self._config.get(key, [])
        if isinstance(raw, list):
            return [str(x) for x in raw if isinstance(x, str)]
        return []

    @property
    def handler_decorators(self) -> frozenset[str]:
        """Decorator names that mark a function for handler analysis."""
        return frozenset(DEFAULT_HANDLER_DECORATORS) | frozenset(self._names("handler_decorators"))

    @property
    def router_markers(self) -> frozenset[str]:
        """Call names that mark a router expression for aggregate analysis."""
        return frozenset(DEFAULT_ROUTER_MARKERS) | frozenset(self._names("router_markers"))

    def extra_types(self) -> TypeRegistry:
        """Project-specific type names to recognize on top of the packaged table."""
        return TypeRegistry.from_mapping(
            {
                "extractors": self._names("extractors"),
                "body_extractors": self._names("body_extractors"),
                "special_arguments": self._names("special_arguments"),
                "response_types": self._names("response_types"),
            }
        )
