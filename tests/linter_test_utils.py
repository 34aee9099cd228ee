import astroid  # type: ignore[import-untyped]

_ADD_MESSAGE_FIELDS = (
    "line", "node", "args", "confidence", "col_offset", "end_lineno", "end_col_offset")


class MockLinter:
    def __init__(self) -> None:
        self.messages = []
        self.calls = []
        self.config = type("config", (), {})()
        self.current_name = "test_module"

    def add_message(self, msg_id, *args, **kwargs):
        self.messages.append(msg_id)
        recorded = dict(zip(_ADD_MESSAGE_FIELDS, args))
        recorded.update(kwargs)
        self.calls.append((msg_id, recorded))

    def _register_options_provider(self, provider):
        pass


def walk(checker, tree) -> None:
    """Dispatch visit_/leave_ callbacks the way pylint's ASTWalker does."""

    def _walk(node):
        node_name = node.__class__.__name__.lower()

        if hasattr(checker, f"visit_{node_name}"):
            getattr(checker, f"visit_{node_name}")(node)

        for child in node.get_children():
            _walk(child)

        if hasattr(checker, f"leave_{node_name}"):
            getattr(checker, f"leave_{node_name}")(node)

    _walk(tree)


def run_checker(checker_factory, code, filename="test.py") -> MockLinter:
    """Parse ``code``, walk it with the checker built by ``checker_factory(linter)``."""
    linter = MockLinter()
    checker = checker_factory(linter)
    tree = astroid.parse(code)
    tree.file = filename
    walk(checker, tree)
    return linter
