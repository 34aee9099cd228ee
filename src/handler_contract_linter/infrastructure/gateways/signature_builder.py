"""Builds SignatureModels from astroid function-like nodes."""

from typing import Optional

import astroid
from astroid import nodes
from astroid.exceptions import AstroidSyntaxError

from handler_contract_linter.domain.errors import SignatureBuildError
from handler_contract_linter.domain.signature import (
    ParamInfo,
    ParamKind,
    SignatureModel,
    SourceSpan,
    TypeRef,
)


class AstroidSignatureBuilder:
    """
    Translates a FunctionDef, AsyncFunctionDef or Lambda into a SignatureModel.

    Pure: only reads the node. Spans are taken verbatim from astroid positions
    so diagnostics can be anchored at the exact syntax element.
    """

    def build(self, node: nodes.NodeNG) -> SignatureModel:
        if isinstance(node, nodes.FunctionDef):
            return self._build_function(node)
        if isinstance(node, nodes.Lambda):
            return self._build_lambda(node)
        raise SignatureBuildError(self._not_a_function_message(node), node=node)

    def _build_function(self, node: nodes.FunctionDef) -> SignatureModel:
        is_async = isinstance(node, nodes.AsyncFunctionDef)
        keyword = SourceSpan.keyword(node, "async def" if is_async else "def")
        parameters = self.parameters(node.args, skip_receiver=self._has_receiver(node))
        return_type: Optional[TypeRef] = None
        if node.returns is not None:
            return_type = self.type_ref(node.returns)
            return_span = SourceSpan.from_node(node.returns)
        else:
            return_span = self._signature_end(node, keyword, parameters)
        return SignatureModel(
            name=node.name,
            is_async=is_async,
            parameters=parameters,
            return_type=return_type,
            return_span=return_span,
            span=keyword,
            is_generator=bool(node.is_generator()),
        )

    def _build_lambda(self, node: nodes.Lambda) -> SignatureModel:
        keyword = SourceSpan.keyword(node, "lambda")
        parameters = self.parameters(node.args, skip_receiver=False)
        return SignatureModel(
            name=node.name,
            is_async=False,
            parameters=parameters,
            return_type=None,
            return_span=self._signature_end(node, keyword, parameters),
            span=keyword,
        )

    def parameters(self, args: nodes.Arguments, skip_receiver: bool) -> tuple[ParamInfo, ...]:
        """Return declared parameters in declaration order."""
        declared: list[tuple[str, Optional[nodes.NodeNG], SourceSpan, ParamKind]] = []
        fallback = SourceSpan.from_node(args.parent)

        positional = [
            (arg, ann, ParamKind.POSITIONAL_ONLY)
            for arg, ann in zip(args.posonlyargs or [], args.posonlyargs_annotations or [])
        ] + [
            (arg, ann, ParamKind.POSITIONAL_OR_KEYWORD)
            for arg, ann in zip(args.args or [], args.annotations or [])
        ]
        if skip_receiver and positional:
            positional = positional[1:]
        for arg, ann, kind in positional:
            declared.append((arg.name, ann, self._param_span(arg, ann), kind))

        if args.vararg:
            star_node = getattr(args, "vararg_node", None)
            span = self._param_span(star_node, args.varargannotation) if star_node is not None else (
                SourceSpan.from_node(args.varargannotation) if args.varargannotation else fallback
            )
            declared.append((args.vararg, args.varargannotation, span, ParamKind.VAR_POSITIONAL))

        for arg, ann in zip(args.kwonlyargs or [], args.kwonlyargs_annotations or []):
            declared.append((arg.name, ann, self._param_span(arg, ann), ParamKind.KEYWORD_ONLY))

        if args.kwarg:
            star_node = getattr(args, "kwarg_node", None)
            span = self._param_span(star_node, args.kwargannotation) if star_node is not None else (
                SourceSpan.from_node(args.kwargannotation) if args.kwargannotation else fallback
            )
            declared.append((args.kwarg, args.kwargannotation, span, ParamKind.VAR_KEYWORD))

        return tuple(
            ParamInfo(
                name=name,
                # *args / **kwargs cannot be extractors whatever their annotation says.
                type_ref=(
                    self.type_ref(ann)
                    if kind not in (ParamKind.VAR_POSITIONAL, ParamKind.VAR_KEYWORD)
                    else TypeRef.opaque(self._star_text(kind, name, ann))
                ),
                position=position,
                span=span,
                kind=kind,
            )
            for position, (name, ann, span, kind) in enumerate(declared)
        )

    def type_ref(self, node: Optional[nodes.NodeNG]) -> TypeRef:
        """Describe an annotation syntactically. Never raises."""
        if node is None:
            return TypeRef.missing()
        text = node.as_string()
        if isinstance(node, nodes.Const):
            if node.value is None:
                return TypeRef(name="None", qualified_name="None", text="None")
            if isinstance(node.value, str):
                return self._string_annotation(node.value)
            return TypeRef.opaque(text)
        if isinstance(node, nodes.Name):
            return TypeRef(name=node.name, qualified_name=node.name, text=text)
        if isinstance(node, nodes.Attribute):
            return TypeRef(name=node.attrname, qualified_name=text, text=text)
        if isinstance(node, nodes.Subscript):
            base = self.type_ref(node.value)
            if base.is_opaque:
                return TypeRef.opaque(text)
            elements = node.slice.elts if isinstance(node.slice, nodes.Tuple) else [node.slice]
            return TypeRef(
                name=base.name,
                qualified_name=base.qualified_name,
                args=tuple(self.type_ref(e) for e in elements),
                text=text,
            )
        if isinstance(node, nodes.BinOp) and node.op == "|":
            return TypeRef(
                name="Union",
                qualified_name="Union",
                args=self._union_members(node),
                text=text,
            )
        return TypeRef.opaque(text)

    def _union_members(self, node: nodes.NodeNG) -> tuple[TypeRef, ...]:
        if isinstance(node, nodes.BinOp) and node.op == "|":
            return self._union_members(node.left) + self._union_members(node.right)
        return (self.type_ref(node),)

    def _string_annotation(self, value: str) -> TypeRef:
        try:
            parsed = astroid.extract_node(value)
        except (AstroidSyntaxError, ValueError):
            return TypeRef.opaque(repr(value))
        if isinstance(parsed, nodes.Expr):
            parsed = parsed.value
        if isinstance(parsed, nodes.Const) and isinstance(parsed.value, str):
            # A string inside a string is not a type.
            return TypeRef.opaque(repr(value))
        return self.type_ref(parsed)

    @staticmethod
    def _star_text(kind: ParamKind, name: str, ann: Optional[nodes.NodeNG]) -> str:
        stars = "*" if kind is ParamKind.VAR_POSITIONAL else "**"
        return f"{stars}{name}: {ann.as_string()}" if ann is not None else f"{stars}{name}"

    @staticmethod
    def _param_span(arg: nodes.NodeNG, annotation: Optional[nodes.NodeNG]) -> SourceSpan:
        span = SourceSpan.from_node(arg)
        if annotation is not None and getattr(annotation, "lineno", None):
            span = span.cover(SourceSpan.from_node(annotation))
        return span

    @staticmethod
    def _has_receiver(node: nodes.FunctionDef) -> bool:
        return node.is_method() and node.type in ("method", "classmethod")

    @staticmethod
    def _signature_end(
        node: nodes.NodeNG, keyword: SourceSpan, parameters: tuple[ParamInfo, ...]
    ) -> SourceSpan:
        """Span of the signature when no return annotation is written."""
        span = keyword
        position = getattr(node, "position", None)
        if position is not None:
            span = span.cover(
                SourceSpan(
                    line=position.lineno,
                    column=position.col_offset,
                    end_line=position.end_lineno,
                    end_column=position.end_col_offset,
                )
            )
        for param in parameters:
            span = span.cover(param.span)
        return span

    @staticmethod
    def _not_a_function_message(node: nodes.NodeNG) -> str:
        name = getattr(node, "name", None)
        kind = type(node).__name__
        if isinstance(node, nodes.ClassDef):
            kind = "class"
        label = f"{kind} '{name}'" if name else kind
        return f"handler annotations can only be applied to functions, not to {label}"
