"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from handler_contract_linter.infrastructure.di.container import HandlerLintContainer
from handler_contract_linter.interface.cli import CLIAppFactory, CLIDependencies
from handler_contract_linter.interface.emitters import TextDiagnosticRenderer


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = HandlerLintContainer()
    guidance = container.get_guidance_service()

    deps = CLIDependencies(
        analysis=container.get_analysis(),
        ast_gateway=container.get_astroid_gateway(),
        guidance_service=guidance,
        renderer=TextDiagnosticRenderer(instructions=guidance.get_manual_instructions),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
