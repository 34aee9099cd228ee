"""Handler contract rules (E9501-E9505), in evaluation priority order."""

from typing import Optional

from handler_contract_linter.domain.constants import (
    CODE_ARGUMENT,
    CODE_BODY_ORDER,
    CODE_GENERATOR,
    CODE_NOT_ASYNC,
    CODE_RETURN,
)
from handler_contract_linter.domain.rules import SignatureRule
from handler_contract_linter.domain.signature import ParamInfo, SignatureModel, SourceSpan
from handler_contract_linter.domain.type_registry import TypeClassifier, TypeKind


class AsyncHandlerRule(SignatureRule):
    """E9501: handlers must be declared with ``async def``."""

    code: str = CODE_NOT_ASYNC
    symbol: str = "handler-not-async"
    description: str = "Handlers must be async functions."

    def passes(self, model: SignatureModel) -> bool:
        return model.is_async

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        return model.span

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        return (model.name,)


class AsyncGeneratorHandlerRule(SignatureRule):
    """E9502: an ``async def`` that yields is an async generator, not an awaitable handler."""

    code: str = CODE_GENERATOR
    symbol: str = "handler-is-generator"
    description: str = "Handlers must return a value, not yield."

    def passes(self, model: SignatureModel) -> bool:
        return not model.is_generator

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        return model.span

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        return (model.name,)


class ExtractorArgumentRule(SignatureRule):
    """E9503: every argument must be a recognized extractor or special argument."""

    code: str = CODE_ARGUMENT
    symbol: str = "handler-argument-not-extractor"
    description: str = "Handler arguments must be extractors."

    def __init__(self, classifier: TypeClassifier) -> None:
        self._classifier = classifier

    def passes(self, model: SignatureModel) -> bool:
        return self._first_unknown(model) is None

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        param = self._first_unknown(model)
        return param.span if param else model.span

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        param = self._first_unknown(model)
        if param is None:
            return ("", "")
        return (param.name, str(param.type_ref))

    def _first_unknown(self, model: SignatureModel) -> Optional[ParamInfo]:
        # Parameters after a misplaced body extractor are left to E9504.
        last = model.last_position
        for param in sorted(model.parameters, key=lambda p: p.position):
            if self._classifier.classify_parameter(param.type_ref) is TypeKind.UNKNOWN:
                return param
            if param.position != last and self._classifier.consumes_body(param.type_ref):
                return None
        return None


class BodyExtractorOrderRule(SignatureRule):
    """E9504: an extractor consuming the request body must be the last argument."""

    code: str = CODE_BODY_ORDER
    symbol: str = "body-extractor-not-last"
    description: str = "The request body extractor must be the last handler argument."

    def __init__(self, classifier: TypeClassifier) -> None:
        self._classifier = classifier

    def passes(self, model: SignatureModel) -> bool:
        return self._misplaced(model) is None

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        param = self._misplaced(model)
        return param.span if param else model.span

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        param = self._misplaced(model)
        if param is None:
            return ("", "")
        return (str(param.type_ref), param.name)

    def _misplaced(self, model: SignatureModel) -> Optional[ParamInfo]:
        last = model.last_position
        for param in sorted(model.parameters, key=lambda p: p.position):
            if param.position != last and self._classifier.consumes_body(param.type_ref):
                return param
        return None


class ResponseReturnRule(SignatureRule):
    """E9505: the return annotation must convert into a response."""

    code: str = CODE_RETURN
    symbol: str = "handler-return-not-response"
    description: str = "Handler return types must be convertible into a response."

    def __init__(self, classifier: TypeClassifier) -> None:
        self._classifier = classifier

    def passes(self, model: SignatureModel) -> bool:
        # No annotation is an implicit None body, which is a valid response.
        if model.return_type is None:
            return True
        return self._classifier.classify_return(model.return_type) is TypeKind.RESPONSE

    def violation_span(self, model: SignatureModel) -> SourceSpan:
        return model.return_span

    def message_args(self, model: SignatureModel) -> tuple[str, ...]:
        return (str(model.return_type) if model.return_type else "None",)


class HandlerRuleSet:
    """Builds the ordered rule set."""

    @staticmethod
    def default(classifier: TypeClassifier) -> tuple[SignatureRule, ...]:
        """Return the handler contract rules in priority order."""
        return (
            AsyncHandlerRule(),
            AsyncGeneratorHandlerRule(),
            ExtractorArgumentRule(classifier),
            BodyExtractorOrderRule(classifier),
            ResponseReturnRule(classifier),
        )
