"""Type classification table and the syntactic classifier built on it."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from handler_contract_linter.domain.constants import (
    ANNOTATED_WRAPPERS,
    NONE_NAMES,
    OPTIONAL_WRAPPERS,
    TUPLE_WRAPPERS,
    UNION_WRAPPERS,
)
from handler_contract_linter.domain.signature import TypeRef


class TypeKind(Enum):
    """Classification of an annotation against the handler contract."""

    EXTRACTOR = "known-extractor"
    SPECIAL_ARGUMENT = "known-special-argument"
    RESPONSE = "known-response-type"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TypeRegistry:
    """Closed sets of recognized type names. Extended, never mutated."""

    extractors: frozenset[str] = field(default_factory=frozenset)
    body_extractors: frozenset[str] = field(default_factory=frozenset)
    special_arguments: frozenset[str] = field(default_factory=frozenset)
    response_types: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Iterable[str]]) -> "TypeRegistry":
        body = frozenset(str(n) for n in data.get("body_extractors", ()))
        return cls(
            # A body extractor is an extractor even if only listed once.
            extractors=frozenset(str(n) for n in data.get("extractors", ())) | body,
            body_extractors=body,
            special_arguments=frozenset(str(n) for n in data.get("special_arguments", ())),
            response_types=frozenset(str(n) for n in data.get("response_types", ())),
        )

    def extend(self, other: "TypeRegistry") -> "TypeRegistry":
        """Return a registry recognizing the names of both registries."""
        return TypeRegistry(
            extractors=self.extractors | other.extractors,
            body_extractors=self.body_extractors | other.body_extractors,
            special_arguments=self.special_arguments | other.special_arguments,
            response_types=self.response_types | other.response_types,
        )


class TypeClassifier:
    """
    Pattern-matches TypeRefs against a TypeRegistry.

    Classification is purely syntactic; anything the table does not name is
    UNKNOWN, and callers treat UNKNOWN as a contract violation.
    """

    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def classify_parameter(self, type_ref: TypeRef) -> TypeKind:
        inner = self.unwrap_parameter(type_ref)
        if inner is None or inner.is_opaque:
            return TypeKind.UNKNOWN
        if inner.name in self._registry.extractors:
            return TypeKind.EXTRACTOR
        if inner.name in self._registry.special_arguments:
            return TypeKind.SPECIAL_ARGUMENT
        return TypeKind.UNKNOWN

    def consumes_body(self, type_ref: TypeRef) -> bool:
        inner = self.unwrap_parameter(type_ref)
        return inner is not None and inner.name in self._registry.body_extractors

    def classify_return(self, type_ref: TypeRef) -> TypeKind:
        if type_ref.is_missing:
            return TypeKind.RESPONSE
        return TypeKind.RESPONSE if self._is_response(type_ref) else TypeKind.UNKNOWN

    def unwrap_parameter(self, type_ref: TypeRef) -> "TypeRef | None":
        """Strip Optional / Union[X, None] / Annotated wrappers. None if ambiguous."""
        if type_ref.is_missing:
            return None
        if type_ref.name in ANNOTATED_WRAPPERS and type_ref.args:
            return self.unwrap_parameter(type_ref.args[0])
        if type_ref.name in OPTIONAL_WRAPPERS and len(type_ref.args) == 1:
            return self.unwrap_parameter(type_ref.args[0])
        if type_ref.name in UNION_WRAPPERS:
            members = [a for a in type_ref.args if a.name not in NONE_NAMES]
            if len(members) == 1 and len(type_ref.args) == 2:
                return self.unwrap_parameter(members[0])
            return None
        return type_ref

    def _is_response(self, type_ref: TypeRef) -> bool:
        if type_ref.is_opaque:
            return False
        if type_ref.name in ANNOTATED_WRAPPERS and type_ref.args:
            return self._is_response(type_ref.args[0])
        if type_ref.name in OPTIONAL_WRAPPERS and len(type_ref.args) == 1:
            # Optional[X] is Union[X, None]; None is an empty response.
            return self._is_response(type_ref.args[0])
        if type_ref.name in UNION_WRAPPERS or type_ref.name in TUPLE_WRAPPERS:
            return bool(type_ref.args) and all(self._is_response(a) for a in type_ref.args)
        return type_ref.name in self._registry.response_types
