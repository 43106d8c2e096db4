"""Dart public surface extractor (hand-written parser, no tree-sitter).

Walks the declaration tree of one file and re-emits only what other
libraries can see: public declarations with their doc comments,
annotations and signatures. Bodies and initializers are dropped, with the
exception of top-level variables and ``static const`` fields, whose
declarations are copied verbatim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import ApiExtractor, ExtractionError
from .dart_syntax import (
    CLASS,
    ENUM,
    EXTENSION_TYPE,
    FIELD,
    MIXIN,
    ConstructorDeclaration,
    ContainerDeclaration,
    Declaration,
    EnumConstantDeclaration,
    FunctionDeclaration,
    ParseResult,
    TypeAliasDeclaration,
    VariableDeclaration,
    parse_dart,
)

log = logging.getLogger(__name__)

INDENT = "  "

# Containers whose constructors are part of the public surface.
_CONSTRUCTOR_PARENTS = frozenset({CLASS, MIXIN, ENUM, EXTENSION_TYPE})


def is_public(name: str | None) -> bool:
    """Unnamed declarations are public; names starting with ``_`` are library-private."""
    return name is None or not name.startswith("_")


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


@dataclass
class EmitScope:
    """Formatting state of one nesting level."""

    depth: int = 0
    first: bool = True

    def child(self) -> EmitScope:
        return EmitScope(depth=self.depth + 1, first=True)


class Emitter:
    """Accumulates output lines with indentation and blank-line spacing."""

    def __init__(self):
        self._chunks: list[str] = []

    def write_line(self, scope: EmitScope, text: str) -> None:
        self._chunks.append(INDENT * scope.depth + text + "\n")
        scope.first = False

    def request_separation(self, scope: EmitScope) -> None:
        """Blank line before the next declaration unless it opens its scope."""
        if not scope.first and self._chunks and not self._ends_with_blank_line():
            self._chunks.append("\n")
        scope.first = True

    def _ends_with_blank_line(self) -> bool:
        last = self._chunks[-1]
        return last == "\n" or last.endswith("\n\n")

    def getvalue(self) -> str:
        return "".join(self._chunks)


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class DartApiExtractor(ApiExtractor):
    """Public API surface of Dart compilation units."""

    @property
    def language_name(self) -> str:
        return "dart"

    @property
    def file_extensions(self) -> list[str]:
        return [".dart"]

    def extract_api(self, source: str, file_path: str = "") -> str:
        result = parse_dart(source)
        if result.errors:
            first = result.errors[0]
            raise ExtractionError(
                f"{len(result.errors)} syntax error(s), first: {first}", result.diagnostics
            )
        for diagnostic in result.diagnostics:
            log.debug("%s: %s", file_path or "<source>", diagnostic)
        return self.render(result)

    def render(self, result: ParseResult) -> str:
        """Emit the public surface of an already parsed unit."""
        return _SurfaceWriter(self, result.source).write_unit(result.unit.declarations)


class _SurfaceWriter:
    """One extraction pass; holds the source and output buffer for a single file."""

    def __init__(self, extractor: DartApiExtractor, source: str):
        self.extractor = extractor
        self.source = source
        self.out = Emitter()

    def span(self, start: int, end: int) -> str:
        return self.extractor.source_span(self.source, start, end)

    def write_unit(self, declarations: list[Declaration]) -> str:
        scope = EmitScope()
        for node in declarations:
            self.emit(node, scope)
        return self.out.getvalue()

    def emit(self, node: Declaration, scope: EmitScope) -> None:
        if isinstance(node, ContainerDeclaration):
            self.emit_container(node, scope)
        elif isinstance(node, ConstructorDeclaration):
            self.emit_constructor(node, scope)
        elif isinstance(node, FunctionDeclaration):
            if node.parent is None:
                self.emit_function(node, scope)
            else:
                self.emit_method(node, scope)
        elif isinstance(node, VariableDeclaration):
            if node.kind == FIELD:
                self.emit_field(node, scope)
            else:
                self.emit_top_level_variable(node, scope)
        elif isinstance(node, TypeAliasDeclaration):
            self.emit_type_alias(node, scope)
        elif isinstance(node, EnumConstantDeclaration):
            self.emit_enum_constant(node, scope)
        else:
            log.debug("no emitter for %s", node.kind)

    def emit_metadata(self, node: Declaration, scope: EmitScope) -> None:
        for comment in node.doc_comment:
            self.out.write_line(scope, comment.text.rstrip())
        for annotation in node.annotations:
            self.out.write_line(scope, self.span(annotation.start, annotation.end))

    # ── declarations ──────────────────────────────────────────────────

    def emit_container(self, node: ContainerDeclaration, scope: EmitScope) -> None:
        if not is_public(node.name):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        self.out.write_line(scope, self.span(node.offset, node.left_brace + 1))
        inner = scope.child()
        for constant in node.constants:
            self.emit_enum_constant(constant, inner)
        for member in node.members:
            self.emit(member, inner)
        self.out.write_line(scope, "}")

    def emit_enum_constant(self, node: EnumConstantDeclaration, scope: EmitScope) -> None:
        if not is_public(node.name):
            return
        self.emit_metadata(node, scope)
        text = self.span(node.offset, node.end)
        if not text.endswith(","):
            text += ","
        self.out.write_line(scope, text)

    def emit_function(self, node: FunctionDeclaration, scope: EmitScope) -> None:
        if not is_public(node.name):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        if node.is_getter or node.parameters is None:
            end = node.body_offset
        else:
            end = node.parameters[1]
        self.out.write_line(scope, self.span(node.offset, end) + ";")

    def emit_method(self, node: FunctionDeclaration, scope: EmitScope) -> None:
        if not is_public(node.name):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        if node.is_getter:
            end = node.body_offset
        elif node.is_setter or node.parameters is not None:
            end = node.parameters[1]
        else:
            end = node.body_offset
        text = self.span(node.offset, end)
        if not text.endswith(";"):
            text += ";"
        self.out.write_line(scope, text)

    def emit_constructor(self, node: ConstructorDeclaration, scope: EmitScope) -> None:
        parent = node.parent
        if parent is None or parent.kind not in _CONSTRUCTOR_PARENTS:
            return
        if not (is_public(node.container_name) and is_public(node.name)):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        text = self.span(node.offset, node.parameters[1])
        if not node.is_external:
            text += ";"
        self.out.write_line(scope, text)

    def emit_field(self, node: VariableDeclaration, scope: EmitScope) -> None:
        public_names = [name for name in node.names if is_public(name)]
        if not public_names:
            return
        self.emit_metadata(node, scope)
        if "static" in node.modifiers and "const" in node.modifiers:
            self.out.write_line(scope, self.span(node.offset, node.semicolon + 1))
            return
        parts = []
        for modifier in ("late", "final", "static"):
            if modifier in node.modifiers:
                parts.append(modifier + " ")
        if node.type_span is not None:
            parts.append(self.span(*node.type_span) + " ")
        elif node.has_var:
            parts.append("var ")
        parts.append(", ".join(public_names))
        self.out.write_line(scope, "".join(parts) + ";")

    def emit_top_level_variable(self, node: VariableDeclaration, scope: EmitScope) -> None:
        if not any(is_public(name) for name in node.names):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        self.out.write_line(scope, self.span(node.offset, node.semicolon + 1))

    def emit_type_alias(self, node: TypeAliasDeclaration, scope: EmitScope) -> None:
        if not is_public(node.name):
            return
        self.out.request_separation(scope)
        self.emit_metadata(node, scope)
        self.out.write_line(scope, self.span(node.offset, node.end))
