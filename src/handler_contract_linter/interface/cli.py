"""CLI entry points for handler-lint - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import typer
from astroid.exceptions import AstroidBuildingError

from handler_contract_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from handler_contract_linter.infrastructure.services.guidance_service import GuidanceService
from handler_contract_linter.interface.emitters import TextDiagnosticRenderer
from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    analysis: HandlerAnalysisUseCase
    ast_gateway: AstroidGateway
    guidance_service: GuidanceService
    renderer: TextDiagnosticRenderer


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def collect_files(paths: List[Path]) -> list[Path]:
        """Expand directories into the .py files below them, sorted."""
        files: list[Path] = []
        for path in paths:
            if path.is_dir():
                files.extend(sorted(p for p in path.rglob("*.py") if p.is_file()))
            else:
                files.append(path)
        return files

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="handler-lint",
            help="handler-lint: explain why a function is not a valid request handler",
            add_completion=False,
        )

        @app.command()
        def check(
            paths: List[Path] = typer.Argument(..., help="Files or directories to analyze"),  # noqa: B008
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log analysis details"),
        ) -> None:
            """Analyze @debug_handler functions and debug_router(...) expressions."""
            if verbose:
                logging.basicConfig(level=logging.DEBUG)
            total = 0
            for file_path in CLIAppFactory.collect_files(paths):
                try:
                    module = deps.ast_gateway.parse_file(str(file_path))
                except AstroidBuildingError as exc:
                    typer.echo(f"error: cannot parse {file_path}: {exc}", err=True)
                    raise typer.Exit(code=2) from exc
                findings = deps.analysis.analyze_module(module)
                if not findings:
                    logger.debug("%s: no handler contract violations", file_path)
                    continue
                source = file_path.read_text(encoding="utf-8")
                rendered = deps.renderer.render_all([f.diagnostic for f in findings], str(file_path), source)
                typer.echo(rendered + "\n")
                total += len(findings)
            if total:
                typer.echo(f"handler-lint: {total} error(s) found", err=True)
                raise typer.Exit(code=1)

        @app.command()
        def rules() -> None:
            """List the handler contract rules in evaluation order."""
            for code, entry in deps.guidance_service.list_rules():
                symbol = entry.get("symbol", code)
                description = entry.get("short_description", "")
                typer.echo(f"{code}  {symbol:<32} {description}")

        return app
