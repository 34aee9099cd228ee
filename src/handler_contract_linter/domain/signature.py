"""Signature model: the normalized shape of a handler callable."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class SourceSpan:
    """A source region. Lines are 1-based, columns 0-based (astroid convention)."""

    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def from_node(cls, node: object) -> "SourceSpan":
        """Build a span from any object carrying astroid position attributes."""
        line = getattr(node, "lineno", None) or 0
        column = getattr(node, "col_offset", None) or 0
        end_line = getattr(node, "end_lineno", None) or line
        end_column = getattr(node, "end_col_offset", None)
        if end_column is None:
            end_column = column
        return cls(line=line, column=column, end_line=end_line, end_column=end_column)

    @classmethod
    def keyword(cls, node: object, keyword: str) -> "SourceSpan":
        """Span covering a keyword at the start of a node (e.g. 'def', 'lambda').

        Definitions carry a ``position`` that starts at their keyword; their
        ``lineno`` points at the first decorator instead.
        """
        position = getattr(node, "position", None)
        if position is not None:
            line, column = position.lineno, position.col_offset
        else:
            line = getattr(node, "lineno", None) or 0
            column = getattr(node, "col_offset", None) or 0
        return cls(line=line, column=column, end_line=line, end_column=column + len(keyword))

    def cover(self, other: "SourceSpan") -> "SourceSpan":
        """Return the smallest span containing both spans."""
        start = min((self.line, self.column), (other.line, other.column))
        end = max((self.end_line, self.end_column), (other.end_line, other.end_column))
        return SourceSpan(line=start[0], column=start[1], end_line=end[0], end_column=end[1])


@dataclass(frozen=True)
class TypeRef:
    """
    Syntactic description of an annotation.

    ``name`` is the last dotted segment of the annotated type (``fw.Json`` ->
    ``Json``) and is empty when the expression cannot be read as a type.
    ``args`` holds generic arguments. ``X | Y`` is described as ``Union[X, Y]``.
    """

    name: str
    qualified_name: str = ""
    args: tuple["TypeRef", ...] = ()
    text: str = ""
    is_missing: bool = False

    @classmethod
    def missing(cls) -> "TypeRef":
        return cls(name="", text="<no annotation>", is_missing=True)

    @classmethod
    def opaque(cls, text: str) -> "TypeRef":
        return cls(name="", qualified_name="", text=text)

    @property
    def is_opaque(self) -> bool:
        return not self.name

    def __str__(self) -> str:
        return self.text or self.qualified_name or self.name


class ParamKind(Enum):
    """How a parameter is declared."""

    POSITIONAL_ONLY = "positional-only"
    POSITIONAL_OR_KEYWORD = "positional-or-keyword"
    VAR_POSITIONAL = "var-positional"
    KEYWORD_ONLY = "keyword-only"
    VAR_KEYWORD = "var-keyword"


@dataclass(frozen=True)
class ParamInfo:
    """One declared parameter, in declaration order."""

    name: str
    type_ref: TypeRef
    position: int
    span: SourceSpan
    kind: ParamKind = ParamKind.POSITIONAL_OR_KEYWORD


@dataclass(frozen=True)
class SignatureModel:
    """
    Declared shape of a handler: asynchrony, ordered parameters, return type.

    ``span`` covers the declaration keyword. ``return_type`` is None when no
    return annotation is written; ``return_span`` then points at the end of
    the signature.
    """

    name: str
    is_async: bool
    parameters: tuple[ParamInfo, ...]
    return_type: Optional[TypeRef]
    return_span: SourceSpan
    span: SourceSpan
    is_generator: bool = False

    @property
    def last_position(self) -> int:
        return len(self.parameters) - 1
