"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.

    pylint --load-plugins handler_contract_linter.infrastructure.checker app/
"""

from pylint.lint import PyLinter

from handler_contract_linter.infrastructure.di.container import HandlerLintContainer
from handler_contract_linter.use_cases.checks.handlers import HandlerContractChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = HandlerLintContainer()
    registry = container.get_guidance_service().get_registry()

    linter.register_checker(HandlerContractChecker(
        linter, analysis=container.get_analysis(), registry=registry))
