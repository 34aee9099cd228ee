"""Diagnostic emitters: pylint's message channel and compiler-style text."""

from typing import TYPE_CHECKING, Callable, Optional

from astroid import nodes

from handler_contract_linter.domain.rules import Diagnostic

if TYPE_CHECKING:
    from pylint.checkers import BaseChecker


class PylintDiagnosticEmitter:
    """Reports diagnostics through a checker's add_message, anchored at the diagnostic span."""

    def __init__(self, checker: "BaseChecker") -> None:
        self._checker = checker

    def emit(self, diagnostic: Optional[Diagnostic], node: nodes.NodeNG) -> bool:
        """Emit one message for ``diagnostic``; nothing for None. Returns True if emitted."""
        if diagnostic is None:
            return False
        span = diagnostic.span
        self._checker.add_message(
            diagnostic.code,
            node=node,
            args=diagnostic.message_args or None,
            line=span.line,
            col_offset=span.column,
            end_lineno=span.end_line,
            end_col_offset=span.end_column,
        )
        return True


class TextDiagnosticRenderer:
    """
    Renders a diagnostic the way compilers do:

        error[E9501]: handlers must be async functions: declare 'handler' with 'async def'
          --> app.py:12:1
           |
        12 | def handler() -> str:
           | ^^^
           = help: Add the async keyword to the handler definition.

    Multi-line spans are underlined on their first line, up to the end of it.
    ``instructions`` maps a rule code to its fix instructions; without it no
    help line is printed.
    """

    def __init__(self, instructions: Optional[Callable[[str], str]] = None) -> None:
        self._instructions = instructions

    def render(self, diagnostic: Diagnostic, path: str, source: str) -> str:
        span = diagnostic.span
        lines = source.splitlines()
        gutter = " " * len(str(span.line))
        rendered = [
            f"error[{diagnostic.code}]: {diagnostic.message}",
            f"{gutter}--> {path}:{span.line}:{span.column + 1}",
        ]
        if 1 <= span.line <= len(lines):
            text = lines[span.line - 1]
            end_column = span.end_column if span.end_line == span.line else len(text)
            width = max(end_column - span.column, 1)
            rendered += [
                f"{gutter} |",
                f"{span.line} | {text}",
                f"{gutter} | {' ' * span.column}{'^' * width}",
            ]
        if self._instructions is not None:
            rendered.append(f"{gutter} = help: {self._instructions(diagnostic.code)}")
        return "\n".join(rendered)

    def render_all(self, diagnostics: list[Diagnostic], path: str, source: str) -> str:
        return "\n\n".join(self.render(d, path, source) for d in diagnostics)
