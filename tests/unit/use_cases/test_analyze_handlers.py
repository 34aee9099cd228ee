"""Unit tests for HandlerAnalysisUseCase: annotated targets, routers and modules."""

from unittest.mock import MagicMock

import astroid
import pytest
from astroid import nodes

from handler_contract_linter.domain.config import ConfigurationLoader
from handler_contract_linter.domain.errors import SignatureBuildError
from handler_contract_linter.domain.selector import DiagnosticSelector
from handler_contract_linter.domain.signature import SourceSpan
from handler_contract_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from handler_contract_linter.infrastructure.gateways.router_gateway import RegistrationSite
from handler_contract_linter.infrastructure.gateways.signature_builder import (
    AstroidSignatureBuilder,
)
from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase


def _marker(module: nodes.Module) -> nodes.Call:
    return next(
        call for call in module.nodes_of_class(nodes.Call)
        if isinstance(call.func, nodes.Name) and call.func.name == "debug_router"
    )


class TestTargets:
    def test_is_handler_target(self, analysis: HandlerAnalysisUseCase) -> None:
        decorated = astroid.extract_node("@debug_handler\nasync def h() -> str: ...")
        plain = astroid.extract_node("async def h() -> str: ...")
        assert analysis.is_handler_target(decorated)
        assert not analysis.is_handler_target(plain)

    def test_configured_decorator_is_a_target(self, selector: DiagnosticSelector, registry: dict) -> None:
        gateway = AstroidGateway()
        custom = HandlerAnalysisUseCase(
            builder=AstroidSignatureBuilder(),
            selector=selector,
            ast_gateway=gateway,
            router_gateway=MagicMock(),
            config_loader=ConfigurationLoader({"handler_decorators": ["endpoint"]}),
            registry=registry,
        )
        assert custom.is_handler_target(astroid.extract_node("@app.endpoint\nasync def h() -> str: ..."))

    def test_analyze_valid_handler(self, analysis: HandlerAnalysisUseCase) -> None:
        node = astroid.extract_node("@debug_handler\nasync def index() -> str: ...")
        assert analysis.analyze_target(node) is None

    def test_analyze_invalid_handler(self, analysis: HandlerAnalysisUseCase) -> None:
        node = astroid.extract_node("@debug_handler\ndef index() -> str: ...")

        finding = analysis.analyze_target(node)

        assert finding is not None
        assert finding.node is node
        assert finding.diagnostic.code == "E9501"
        assert finding.diagnostic.span == SourceSpan(2, 0, 2, 3)

    def test_decorated_handler_is_reported_at_def_line(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
@debug_handler
def index() -> str:
    return "hi"
"""
        )

        findings = analysis.analyze_module(module)

        span = findings[0].diagnostic.span
        assert (findings[0].diagnostic.code, span.line, span.column) == ("E9501", 3, 0)

    def test_analyze_raises_for_non_function(self, analysis: HandlerAnalysisUseCase) -> None:
        with pytest.raises(SignatureBuildError):
            analysis.analyze(astroid.extract_node("class Index:\n    pass"))

    def test_decorated_class_is_malformed(self, analysis: HandlerAnalysisUseCase) -> None:
        node = astroid.extract_node("@debug_handler\nclass Index:\n    pass")

        finding = analysis.analyze_target(node)

        assert finding is not None
        assert finding.diagnostic.code == "E9506"
        assert finding.diagnostic.symbol == "malformed-handler"
        assert finding.diagnostic.span == SourceSpan(2, 0, 2, 5)
        assert finding.diagnostic.message == (
            "handler annotations can only be applied to functions, not to class 'Index'"
        )


class TestRouters:
    def test_one_finding_per_failing_handler(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
def index() -> str: ...
async def create(body: Json[Item], path: Path[int]) -> str: ...
async def ok() -> str: ...
app = debug_router(Router().route("/", get(index).post(create)).route("/ok", get(ok)))
"""
        )

        findings = analysis.analyze_router(_marker(module))

        assert [(f.diagnostic.handler_name, f.diagnostic.code) for f in findings] == [
            ("index", "E9501"),
            ("create", "E9504"),
        ]
        assert findings[0].node is module.body[0]

    def test_handler_registered_twice_is_reported_once(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
def index() -> str: ...
app = debug_router(Router().route("/", get(index)).route("/home", get(index)))
"""
        )
        assert len(analysis.analyze_router(_marker(module))) == 1

    def test_annotated_handler_is_left_to_its_definition(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
@debug_handler
def index() -> str: ...
app = debug_router(Router().route("/", get(index)))
"""
        )
        assert analysis.analyze_router(_marker(module)) == []

    def test_handler_from_another_module_is_reported_at_registration(
        self, selector: DiagnosticSelector, registry: dict
    ) -> None:
        routes = astroid.parse('app = debug_router(Router().route("/", get(create)))', module_name="routes")
        views = astroid.parse("def create() -> str: ...", module_name="views")
        reference = [n for n in routes.nodes_of_class(nodes.Name) if n.name == "create"][0]
        router_gateway = MagicMock()
        router_gateway.registration_sites.return_value = [
            RegistrationSite(reference=reference, handler=views.body[0])
        ]
        use_case = HandlerAnalysisUseCase(
            builder=AstroidSignatureBuilder(),
            selector=selector,
            ast_gateway=AstroidGateway(),
            router_gateway=router_gateway,
            config_loader=ConfigurationLoader(),
            registry=registry,
        )

        findings = use_case.analyze_router(_marker(routes))

        assert len(findings) == 1
        finding = findings[0]
        assert finding.node is reference
        assert finding.diagnostic.code == "E9507"
        assert finding.diagnostic.span == SourceSpan.from_node(reference)
        assert finding.diagnostic.message == (
            "handler 'create' registered here violates the handler contract: "
            "handlers must be async functions: declare 'create' with 'async def'"
        )

    def test_handler_in_two_routers_is_reported_once_per_module(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
async def show(db: Database) -> str: ...
app = Router().route("/", get(show))
public = debug_router(app)
admin = debug_router(app)
"""
        )

        findings = analysis.analyze_module(module)

        assert [(f.diagnostic.code, f.diagnostic.span.line) for f in findings] == [("E9503", 2)]

    def test_named_method_router_is_followed(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
async def show(db: Database) -> str: ...
show_route = get(show)
app = Router().route("/", show_route)
debug_router(app)
"""
        )

        findings = analysis.analyze_module(module)

        assert [(f.diagnostic.handler_name, f.diagnostic.code) for f in findings] == [("show", "E9503")]

    def test_unresolved_handlers_are_skipped(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse('app = debug_router(Router().route("/", get(somewhere_else)))')
        assert analysis.analyze_router(_marker(module)) == []


class TestModule:
    def test_findings_in_source_order(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse(
            """
@debug_handler
async def show(db: Database) -> str: ...

def listing() -> str: ...

@debug_handler
async def fine(path: Path[int]) -> Json[Item]: ...

@debug_handler
async def render() -> Template: ...

app = debug_router(Router().route("/", get(listing)))
"""
        )

        findings = analysis.analyze_module(module)

        assert [f.diagnostic.code for f in findings] == ["E9503", "E9501", "E9505"]
        assert [f.diagnostic.handler_name for f in findings] == ["show", "listing", "render"]

    def test_clean_module(self, analysis: HandlerAnalysisUseCase) -> None:
        module = astroid.parse("@debug_handler\nasync def index() -> str:\n    return 'hi'\n")
        assert analysis.analyze_module(module) == []
