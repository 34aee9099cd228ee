"""Unit tests for HandlerContractChecker (E9501-E9507) through a mock linter."""

import astroid

from handler_contract_linter.use_cases.analyze_handlers import HandlerAnalysisUseCase
from handler_contract_linter.use_cases.checks.handlers import HandlerContractChecker
from tests.linter_test_utils import MockLinter, run_checker, walk


def _factory(analysis: HandlerAnalysisUseCase, registry: dict):
    return lambda linter: HandlerContractChecker(linter, analysis=analysis, registry=registry)


class TestHandlerContractChecker:
    def test_msgs_come_from_registry(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        checker = _factory(analysis, registry)(MockLinter())
        assert sorted(checker.msgs) == ["E9501", "E9502", "E9503", "E9504", "E9505", "E9506", "E9507"]
        assert checker.msgs["E9501"][1] == "handler-not-async"

    def test_sync_handler(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
@debug_handler
def index() -> str:
    return "hi"
"""
        linter = run_checker(_factory(analysis, registry), code)

        assert linter.messages == ["E9501"]
        msg_id, call = linter.calls[0]
        assert call["args"] == ("index",)
        assert (call["line"], call["col_offset"], call["end_lineno"], call["end_col_offset"]) == (3, 0, 3, 3)

    def test_async_handler_is_visited(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
@debug_handler
async def index(db: Database) -> str:
    return "hi"
"""
        linter = run_checker(_factory(analysis, registry), code)
        assert linter.messages == ["E9503"]

    def test_valid_handler_is_silent(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
@debug_handler
async def index(path: Path[int], body: Json[Item]) -> Json[Item]:
    ...
"""
        assert run_checker(_factory(analysis, registry), code).messages == []

    def test_undecorated_functions_are_ignored(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
def helper(x) -> int:
    return x
"""
        assert run_checker(_factory(analysis, registry), code).messages == []

    def test_decorated_class(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
@debug_handler
class Index:
    pass
"""
        assert run_checker(_factory(analysis, registry), code).messages == ["E9506"]

    def test_router_reports_each_failing_handler(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
def index() -> str: ...
async def show(id: int) -> str: ...
async def ok() -> str: ...
app = debug_router(Router().route("/", get(index)).route("/{id}", get(show)).route("/ok", get(ok)))
"""
        linter = run_checker(_factory(analysis, registry), code)
        assert linter.messages == ["E9501", "E9503"]

    def test_handler_mounted_in_two_routers_is_reported_once(
        self, analysis: HandlerAnalysisUseCase, registry: dict
    ) -> None:
        code = """
async def show(db: Database) -> str: ...
app = Router().route("/", get(show))
public = debug_router(app)
admin = debug_router(app)
"""
        assert run_checker(_factory(analysis, registry), code).messages == ["E9503"]

    def test_each_module_is_reported_separately(self, analysis: HandlerAnalysisUseCase, registry: dict) -> None:
        code = """
async def show(db: Database) -> str: ...
app = debug_router(Router().route("/", get(show)))
"""
        linter = MockLinter()
        checker = _factory(analysis, registry)(linter)
        for _ in range(2):
            walk(checker, astroid.parse(code))
        assert linter.messages == ["E9503", "E9503"]

    def test_router_and_annotation_do_not_double_report(
        self, analysis: HandlerAnalysisUseCase, registry: dict
    ) -> None:
        code = """
@debug_handler
def index() -> str: ...
app = debug_router(Router().route("/", get(index)))
"""
        assert run_checker(_factory(analysis, registry), code).messages == ["E9501"]

