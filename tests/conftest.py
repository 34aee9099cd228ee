"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the project root on sys.path. Fixtures build the real dependency graph
with an empty [tool.handler-lint] so tests never read the caller's
pyproject.toml.
"""

import pytest

from handler_contract_linter.domain.config import ConfigurationLoader
from handler_contract_linter.domain.selector import DiagnosticSelector
from handler_contract_linter.domain.type_registry import TypeClassifier
from handler_contract_linter.infrastructure.di.container import HandlerLintContainer
from handler_contract_linter.infrastructure.gateways.signature_builder import (
    AstroidSignatureBuilder,
)
from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase


@pytest.fixture
def container() -> HandlerLintContainer:
    return HandlerLintContainer(config_loader=ConfigurationLoader({}))


@pytest.fixture
def registry(container: HandlerLintContainer) -> dict:
    return container.get_guidance_service().get_registry()


@pytest.fixture
def classifier(container: HandlerLintContainer) -> TypeClassifier:
    return container.get_typed("TypeClassifier", TypeClassifier)


@pytest.fixture
def selector(container: HandlerLintContainer) -> DiagnosticSelector:
    return container.get_selector()


@pytest.fixture
def analysis(container: HandlerLintContainer) -> HandlerAnalysisUseCase:
    return container.get_analysis()


@pytest.fixture
def builder() -> AstroidSignatureBuilder:
    return AstroidSignatureBuilder()
