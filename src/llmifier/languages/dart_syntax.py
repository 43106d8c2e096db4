"""Declaration-level Dart parser.

Builds a read-only tree of the declarations in one compilation unit:
containers (class, mixin, extension, extension type, enum) with their
members, top-level functions, variables and type aliases. Function bodies,
initializers and header clauses are skipped by bracket matching; only the
offsets the public surface extractor needs are recorded.

Parse problems are reported as diagnostics instead of exceptions so callers
can decide whether a partially understood file is usable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .dart_scanner import (
    DOC_BLOCK,
    DOC_LINE,
    EOF,
    IDENT,
    PUNCT,
    Comment,
    DartScanError,
    Token,
    closing_bracket,
    scan,
)

log = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"

# Declaration kinds
CLASS = "class"
MIXIN = "mixin"
EXTENSION = "extension"
EXTENSION_TYPE = "extension_type"
ENUM = "enum"
ENUM_CONSTANT = "enum_constant"
FUNCTION = "function"
METHOD = "method"
CONSTRUCTOR = "constructor"
FIELD = "field"
TOP_LEVEL_VARIABLE = "top_level_variable"
TYPE_ALIAS = "type_alias"

_DIRECTIVES = frozenset({"library", "import", "export", "part"})
_CLASS_MODIFIERS = frozenset(
    {"abstract", "base", "interface", "final", "sealed", "mixin", "augment", "macro"}
)
_MEMBER_MODIFIERS = frozenset(
    {"external", "static", "abstract", "covariant", "late", "final", "const", "var",
     "factory", "augment"}
)
_VARIABLE_MODIFIERS = frozenset({"late", "final", "static", "const"})
_POSTFIX_OPERATORS = frozenset({"!", "++", "--"})
_TYPE_ARGUMENT_LOOKAHEAD = 128


class DartSyntaxError(Exception):
    def __init__(self, message: str, offset: int):
        super().__init__(message)
        self.message = message
        self.offset = offset


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    message: str
    offset: int

    def __str__(self) -> str:
        return f"{self.severity}: {self.message} (offset {self.offset})"


@dataclass(frozen=True)
class Annotation:
    start: int
    end: int


@dataclass(eq=False)
class Declaration:
    """Common shape of every declaration node.

    ``offset`` is the first token after the doc comment and annotations,
    ``end`` the end of the last token that belongs to the declaration.
    """

    kind: str
    name: str | None
    offset: int
    end: int
    doc_comment: tuple[Comment, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    parent: ContainerDeclaration | None = field(default=None, repr=False)


@dataclass(eq=False)
class ContainerDeclaration(Declaration):
    left_brace: int = -1
    members: list[Declaration] = field(default_factory=list)
    constants: list[EnumConstantDeclaration] = field(default_factory=list)


@dataclass(eq=False)
class EnumConstantDeclaration(Declaration):
    pass


@dataclass(eq=False)
class FunctionDeclaration(Declaration):
    is_getter: bool = False
    is_setter: bool = False
    parameters: tuple[int, int] | None = None
    body_offset: int = -1
    is_external: bool = False
    is_abstract: bool = False
    is_static: bool = False


@dataclass(eq=False)
class ConstructorDeclaration(Declaration):
    parameters: tuple[int, int] = (-1, -1)
    is_external: bool = False
    is_factory: bool = False
    is_const: bool = False

    @property
    def container_name(self) -> str | None:
        return self.parent.name if self.parent is not None else None


@dataclass(eq=False)
class VariableDeclaration(Declaration):
    names: list[str] = field(default_factory=list)
    type_span: tuple[int, int] | None = None
    modifiers: frozenset[str] = frozenset()
    has_var: bool = False
    semicolon: int = -1


@dataclass(eq=False)
class TypeAliasDeclaration(Declaration):
    is_generic: bool = False


@dataclass
class CompilationUnit:
    declarations: list[Declaration] = field(default_factory=list)


@dataclass
class ParseResult:
    source: str
    unit: CompilationUnit
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]


# ---------------------------------------------------------------------------
# Documentation comment lookup
# ---------------------------------------------------------------------------


def _find_doc_start(comments: tuple[Comment, ...]) -> int | None:
    """Index of the comment that starts the documentation, or None.

    The last ``/** */`` block wins unless ``///`` lines follow it; a run of
    ``///`` lines is anchored at its first line. Plain comments do not end a run.
    """
    start = None
    in_line_run = False
    for index, comment in enumerate(comments):
        if comment.kind == DOC_LINE:
            if not in_line_run:
                start = index
                in_line_run = True
        elif comment.kind == DOC_BLOCK:
            start = index
            in_line_run = False
    return start


def _collect_doc(comments: tuple[Comment, ...]) -> tuple[Comment, ...]:
    start = _find_doc_start(comments)
    if start is None:
        return ()
    first = comments[start]
    if first.kind == DOC_BLOCK:
        return (first,)
    # plain comments inside the run are kept
    last = max(i for i, c in enumerate(comments) if c.kind == DOC_LINE)
    return comments[start:last + 1]


def find_doc_comment(
    first_token: Token, annotation_tokens: list[Token]
) -> tuple[Comment, ...]:
    """Doc comment before the declaration keyword, else before an annotation (last first)."""
    doc = _collect_doc(first_token.comments)
    if doc:
        return doc
    for token in reversed(annotation_tokens):
        doc = _collect_doc(token.comments)
        if doc:
            return doc
    return ()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, source: str, tokens: list[Token]):
        self.source = source
        self.tokens = tokens
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []
        self.partner = self._match_brackets()

    # ── token helpers ─────────────────────────────────────────────────

    def peek(self, ahead: int = 0) -> Token:
        index = min(self.pos + ahead, len(self.tokens) - 1)
        return self.tokens[index]

    def at(self, text: str, ahead: int = 0) -> bool:
        tok = self.peek(ahead)
        return tok.kind in (IDENT, PUNCT) and tok.text == text

    def at_word(self, ahead: int = 0) -> bool:
        return self.peek(ahead).kind == IDENT

    def at_end(self) -> bool:
        return self.peek().kind == EOF

    def advance(self) -> Token:
        tok = self.peek()
        if tok.kind == EOF:
            raise DartSyntaxError("Unexpected end of file", tok.start)
        self.pos += 1
        return tok

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def expect(self, text: str) -> Token:
        if not self.at(text):
            tok = self.peek()
            raise DartSyntaxError(f"Expected '{text}' but found '{tok.text}'", tok.start)
        return self.advance()

    def expect_word(self) -> Token:
        if not self.at_word():
            tok = self.peek()
            raise DartSyntaxError(f"Expected an identifier but found '{tok.text}'", tok.start)
        return self.advance()

    def skip_group(self) -> Token:
        """Skip a bracketed group at the current position; return its closing token."""
        close = self.partner[self.pos]
        self.pos = close + 1
        return self.tokens[close]

    def warn(self, message: str, offset: int) -> None:
        self.diagnostics.append(Diagnostic(WARNING, message, offset))

    def _match_brackets(self) -> dict[int, int]:
        partner: dict[int, int] = {}
        stack: list[int] = []
        for index, tok in enumerate(self.tokens):
            if tok.kind != PUNCT:
                continue
            if tok.is_opener():
                stack.append(index)
            elif tok.text in (")", "]", "}"):
                if not stack:
                    raise DartSyntaxError(f"Unmatched '{tok.text}'", tok.start)
                opener = stack.pop()
                expected = closing_bracket(self.tokens[opener].text)
                if tok.text != expected:
                    raise DartSyntaxError(
                        f"Expected '{expected}' but found '{tok.text}'", tok.start
                    )
                partner[opener] = index
                partner[index] = opener
        if stack:
            tok = self.tokens[stack[-1]]
            raise DartSyntaxError(f"Unclosed '{tok.text}'", tok.start)
        return partner

    def skip_type_arguments(self, index: int, limit: int | None = None) -> int | None:
        """Index after the ``<...>`` list starting at *index*, or None if it is not one.

        With *limit*, give up after that many tokens.
        """
        tokens = self.tokens
        if tokens[index].text != "<":
            return None
        depth = 0
        end = len(tokens) if limit is None else min(len(tokens), index + limit)
        while index < end:
            tok = tokens[index]
            if tok.kind == PUNCT and tok.text == "<":
                depth += 1
            elif tok.kind == PUNCT and tok.text == ">":
                depth -= 1
                if depth == 0:
                    return index + 1
            elif tok.kind == PUNCT and tok.text == "(":
                index = self.partner[index]
            elif tok.kind == IDENT or (tok.kind == PUNCT and tok.text in (",", ".", "?")):
                pass
            else:
                return None
            index += 1
        return None

    def skip_to_semicolon(self) -> Token:
        while True:
            tok = self.peek()
            if tok.kind == EOF:
                raise DartSyntaxError("Expected ';'", tok.start)
            if tok.is_opener():
                self.skip_group()
            elif tok.kind == PUNCT and tok.text == ";":
                return self.advance()
            else:
                self.advance()

    # ── compilation unit ──────────────────────────────────────────────

    def parse_unit(self) -> CompilationUnit:
        unit = CompilationUnit()
        while not self.at_end():
            decl = self.parse_top_level()
            if decl is not None:
                unit.declarations.append(decl)
        return unit

    def parse_metadata(self) -> tuple[list[Annotation], list[Token]]:
        annotations = []
        first_tokens = []
        while self.at("@"):
            at_token = self.advance()
            self.expect_word()
            while self.at(".") and self.at_word(1):
                self.advance()
                self.advance()
            if self.at("<"):
                after = self.skip_type_arguments(self.pos)
                if after is not None and self.tokens[after].text == "(":
                    self.pos = after
            if self.at("(") and self.peek().start == self.previous().end:
                self.skip_group()
            annotations.append(Annotation(at_token.start, self.previous().end))
            first_tokens.append(at_token)
        return annotations, first_tokens

    def parse_top_level(self) -> Declaration | None:
        if self.at(";"):
            self.warn("Unexpected ';'", self.advance().start)
            return None
        annotations, annotation_tokens = self.parse_metadata()
        first = self.peek()
        doc = find_doc_comment(first, annotation_tokens)
        common = dict(offset=first.start, doc_comment=doc, annotations=tuple(annotations))
        text = first.text if first.kind == IDENT else None

        if text in _DIRECTIVES and not self.at("(", 1) and not self.at("<", 1) \
                and not self.at("=", 1) and not self.at(".", 1):
            self.skip_to_semicolon()
            return None

        container_kind = self.container_keyword()
        if container_kind == "class":
            return self.parse_class(common)
        if container_kind == "mixin":
            return self.parse_mixin(common)
        if text == "enum" and self.at_word(1):
            return self.parse_enum(common)
        if text == "extension" and (self.at_word(1) or self.at("<", 1)):
            return self.parse_extension(common)
        if text == "typedef":
            return self.parse_type_alias(common)
        return self.parse_member_like(None, common)

    def container_keyword(self) -> str | None:
        ahead = 0
        words = []
        while self.at_word(ahead) and self.peek(ahead).text in _CLASS_MODIFIERS:
            words.append(self.peek(ahead).text)
            ahead += 1
        if self.at("class", ahead) and self.at_word(ahead + 1):
            return "class"
        if words and words[-1] == "mixin" and self.at_word(ahead):
            return "mixin"
        return None

    # ── containers ────────────────────────────────────────────────────

    def _scan_header(self) -> int | None:
        """Advance to the container's ``{``; returns its offset, or None for ``= ...;`` forms."""
        while True:
            tok = self.peek()
            if tok.kind == EOF:
                raise DartSyntaxError("Expected a class body", tok.start)
            if tok.kind == PUNCT and tok.text == "{":
                return tok.start
            if tok.kind == PUNCT and tok.text == "=":
                self.skip_to_semicolon()
                return None
            if tok.kind == PUNCT and tok.text == ";":
                raise DartSyntaxError("Expected a class body", tok.start)
            if tok.is_opener():
                self.skip_group()
            else:
                self.advance()

    def parse_class(self, common: dict) -> ContainerDeclaration | None:
        while not self.at("class"):
            self.advance()
        self.advance()
        name = self.expect_word().text
        left_brace = self._scan_header()
        if left_brace is None:
            log.debug("skipping class type alias %s", name)
            return None
        node = ContainerDeclaration(kind=CLASS, name=name, end=-1, left_brace=left_brace, **common)
        self.parse_container_body(node)
        return node

    def parse_mixin(self, common: dict) -> ContainerDeclaration:
        while not self.at("mixin"):
            self.advance()
        self.advance()
        name = self.expect_word().text
        left_brace = self._scan_header()
        if left_brace is None:
            raise DartSyntaxError("Expected a mixin body", self.previous().start)
        node = ContainerDeclaration(kind=MIXIN, name=name, end=-1, left_brace=left_brace, **common)
        self.parse_container_body(node)
        return node

    def parse_extension(self, common: dict) -> ContainerDeclaration:
        self.advance()
        kind = EXTENSION
        name = None
        if self.at("type") and (self.at_word(1) and not self.at("on", 1)):
            kind = EXTENSION_TYPE
            self.advance()
            if self.at("const") and self.at_word(1):
                self.advance()
            name = self.expect_word().text
        elif self.at_word() and not self.at("on"):
            name = self.advance().text
        left_brace = self._scan_header()
        if left_brace is None:
            raise DartSyntaxError("Expected an extension body", self.previous().start)
        node = ContainerDeclaration(kind=kind, name=name, end=-1, left_brace=left_brace, **common)
        self.parse_container_body(node)
        return node

    def parse_enum(self, common: dict) -> ContainerDeclaration:
        self.advance()
        name = self.expect_word().text
        left_brace = self._scan_header()
        if left_brace is None:
            raise DartSyntaxError("Expected an enum body", self.previous().start)
        node = ContainerDeclaration(kind=ENUM, name=name, end=-1, left_brace=left_brace, **common)
        self.parse_container_body(node)
        return node

    def parse_container_body(self, node: ContainerDeclaration) -> None:
        close = self.partner[self.pos]
        self.advance()
        if node.kind == ENUM:
            self.parse_enum_constants(node, close)
        while self.pos < close:
            member = self.parse_member(node)
            if member is not None:
                member.parent = node
                node.members.append(member)
        if self.pos != close:
            raise DartSyntaxError("Member extends past the end of its body", self.peek().start)
        node.end = self.advance().end

    def parse_enum_constants(self, node: ContainerDeclaration, close: int) -> None:
        while self.pos < close:
            if self.at(";"):
                self.advance()
                return
            annotations, annotation_tokens = self.parse_metadata()
            first = self.expect_word()
            doc = find_doc_comment(first, annotation_tokens)
            if self.at("<"):
                after = self.skip_type_arguments(self.pos)
                if after is None:
                    raise DartSyntaxError("Invalid type arguments", self.peek().start)
                self.pos = after
            if self.at(".") and self.at_word(1):
                self.advance()
                self.advance()
            if self.at("("):
                self.skip_group()
            constant = EnumConstantDeclaration(
                kind=ENUM_CONSTANT,
                name=first.text,
                offset=first.start,
                end=self.previous().end,
                doc_comment=doc,
                annotations=tuple(annotations),
                parent=node,
            )
            node.constants.append(constant)
            if self.at(","):
                self.advance()
            elif self.at(";"):
                self.advance()
                return
            elif self.pos != close:
                tok = self.peek()
                raise DartSyntaxError(f"Expected ',' or ';' but found '{tok.text}'", tok.start)

    # ── type aliases ──────────────────────────────────────────────────

    def parse_type_alias(self, common: dict) -> TypeAliasDeclaration:
        self.advance()
        is_generic = False
        name = None
        if self.at_word():
            ahead = 1
            if self.at("<", 1):
                after = self.skip_type_arguments(self.pos + 1)
                ahead = (after - self.pos) if after is not None else 1
            if self.at("=", ahead):
                is_generic = True
                name = self.peek().text
        if not is_generic:
            while not self.at("("):
                tok = self.advance()
                if tok.kind == IDENT:
                    name = tok.text
                    if self.at("<"):
                        after = self.skip_type_arguments(self.pos)
                        if after is None:
                            raise DartSyntaxError("Invalid type parameters", self.peek().start)
                        self.pos = after
                elif tok.text == ";":
                    raise DartSyntaxError("Expected a type alias", tok.start)
            if name is None:
                raise DartSyntaxError("Expected a type alias name", self.peek().start)
        semicolon = self.skip_to_semicolon()
        return TypeAliasDeclaration(
            kind=TYPE_ALIAS, name=name, end=semicolon.end, is_generic=is_generic, **common
        )

    # ── members ───────────────────────────────────────────────────────

    def parse_member(self, container: ContainerDeclaration) -> Declaration | None:
        if self.at(";"):
            self.warn("Unexpected ';'", self.advance().start)
            return None
        annotations, annotation_tokens = self.parse_metadata()
        first = self.peek()
        doc = find_doc_comment(first, annotation_tokens)
        common = dict(offset=first.start, doc_comment=doc, annotations=tuple(annotations))
        return self.parse_member_like(container, common)

    def parse_modifiers(self) -> set[str]:
        modifiers = set()
        while (
            self.at_word()
            and self.peek().text in _MEMBER_MODIFIERS
            and (self.at_word(1) or self.at("(", 1))
        ):
            modifiers.add(self.advance().text)
        return modifiers

    def is_constructor_start(self, container: ContainerDeclaration | None) -> bool:
        if container is None or container.name is None:
            return False
        if not (self.at_word() and self.peek().text == container.name):
            return False
        if self.at("(", 1):
            return True
        return self.at(".", 1) and self.at_word(2) and self.at("(", 3)

    def parse_member_like(
        self, container: ContainerDeclaration | None, common: dict
    ) -> Declaration:
        modifiers = self.parse_modifiers()
        if self.is_constructor_start(container):
            return self.parse_constructor(modifiers, common)
        return self.parse_callable_or_variable(container, modifiers, common)

    def parse_constructor(self, modifiers: set[str], common: dict) -> ConstructorDeclaration:
        self.advance()
        name = None
        if self.at("."):
            self.advance()
            name = self.advance().text
        params_open = self.expect("(")
        self.pos -= 1
        params_close = self.skip_group()
        self.parse_function_body(constructor=True)
        return ConstructorDeclaration(
            kind=CONSTRUCTOR,
            name=name,
            end=self.previous().end,
            parameters=(params_open.start, params_close.end),
            is_external="external" in modifiers,
            is_factory="factory" in modifiers,
            is_const="const" in modifiers,
            **common,
        )

    def parse_callable_or_variable(
        self, container: ContainerDeclaration | None, modifiers: set[str], common: dict
    ) -> Declaration:
        is_getter = is_setter = False
        name_token = None
        # Consecutive words seen in the head: at most a type and a name.
        words = 0
        type_start = self.peek().start
        while True:
            tok = self.peek()
            if tok.kind == EOF:
                raise DartSyntaxError("Expected a declaration", tok.start)
            if tok.kind == IDENT:
                if tok.text == "get" and self.at_word(1) and not (self.at("(", 2) or self.at("<", 2)):
                    self.advance()
                    name_token = self.advance()
                    is_getter = True
                    break
                if tok.text == "set" and self.at_word(1) and self.at("(", 2):
                    self.advance()
                    name_token = self.advance()
                    is_setter = True
                    break
                if tok.text == "operator" and self.peek(1).kind == PUNCT and not self.at("(", 1):
                    self.advance()
                    start = self.peek().start
                    while not self.at("("):
                        self.advance()
                    name_token = Token(IDENT, self.source[start:self.previous().end].replace(" ", ""),
                                       start, self.previous().end)
                    break
                if words >= 2:
                    raise DartSyntaxError(f"Unexpected identifier '{tok.text}'", tok.start)
                self.advance()
                words += 1
                if self.at("<"):
                    after = self.skip_type_arguments(self.pos)
                    if after is None:
                        raise DartSyntaxError("Invalid type arguments", self.peek().start)
                    if tok.text != "Function" and self.tokens[after].text == "(":
                        name_token = tok
                        self.pos = after
                        break
                    self.pos = after
                    continue
                if self.at("(") and tok.text != "Function":
                    name_token = tok
                    break
                continue
            if tok.kind == PUNCT and tok.text in (";", "=", ","):
                return self.parse_variable(container, modifiers, common, type_start)
            if tok.kind == PUNCT and tok.text == "(":
                # record type or Function parameter types
                self.skip_group()
                words = 1
                continue
            if tok.kind == PUNCT and tok.text == "?":
                self.advance()
                continue
            if tok.kind == PUNCT and tok.text == ".":
                self.advance()
                words = max(words - 1, 0)
                continue
            raise DartSyntaxError(f"Unexpected '{tok.text}'", tok.start)

        parameters = None
        if not is_getter:
            params_open = self.expect("(")
            self.pos -= 1
            params_close = self.skip_group()
            parameters = (params_open.start, params_close.end)
        body_token = self.peek()
        body_offset = self.parse_function_body(constructor=False)
        return FunctionDeclaration(
            kind=METHOD if container is not None else FUNCTION,
            name=name_token.text,
            end=self.previous().end,
            is_getter=is_getter,
            is_setter=is_setter,
            parameters=parameters,
            body_offset=body_offset,
            is_external="external" in modifiers,
            is_abstract=body_token.text == ";",
            is_static="static" in modifiers,
            **common,
        )

    def parse_function_body(self, constructor: bool) -> int:
        """Skip a function body; return the offset where the body starts."""
        tok = self.peek()
        body_offset = tok.start
        if tok.kind == IDENT and tok.text in ("async", "sync") and (
            self.at("{", 1) or self.at("=>", 1) or self.at("*", 1)
        ):
            self.advance()
            if self.at("*"):
                self.advance()
            tok = self.peek()
        if tok.kind == PUNCT and tok.text == "{":
            self.skip_group()
        elif tok.kind == PUNCT and tok.text == "=>":
            self.advance()
            self.skip_to_semicolon()
        elif tok.kind == PUNCT and tok.text == ";":
            self.advance()
        elif constructor and tok.kind == PUNCT and tok.text == "=":
            self.advance()
            self.skip_to_semicolon()
        elif constructor and tok.kind == PUNCT and tok.text == ":":
            self.advance()
            self.skip_initializers()
        else:
            raise DartSyntaxError(f"Expected a function body but found '{tok.text}'", tok.start)
        return body_offset

    def skip_initializers(self) -> None:
        while True:
            tok = self.peek()
            if tok.kind == EOF:
                raise DartSyntaxError("Expected a constructor body", tok.start)
            if tok.kind == PUNCT and tok.text == ";":
                self.advance()
                return
            if tok.kind == PUNCT and tok.text == "{":
                prev = self.previous()
                self.skip_group()
                if prev.text == "const":
                    continue
                if prev.kind != PUNCT or prev.text in (")", "]", "}") or prev.text in _POSTFIX_OPERATORS:
                    return
                # `int? {` ends a nullable type unless a ternary follows
                if prev.text == "?" and not self.at(":"):
                    return
            elif tok.is_opener():
                self.skip_group()
            else:
                self.advance()

    # ── variables ─────────────────────────────────────────────────────

    def parse_variable(
        self,
        container: ContainerDeclaration | None,
        modifiers: set[str],
        common: dict,
        type_start: int,
    ) -> VariableDeclaration:
        name_token = self.previous()
        if name_token.kind != IDENT or name_token.start < type_start:
            tok = self.peek()
            raise DartSyntaxError("Expected a variable name", tok.start)
        type_span = None
        if name_token.start > type_start:
            type_end = self.tokens[self.pos - 2].end
            type_span = (type_start, type_end)
        names = [name_token.text]
        while True:
            tok = self.advance()
            if tok.text == ";":
                semicolon = tok
                break
            if tok.text == ",":
                names.append(self.expect_word().text)
            elif tok.text == "=":
                self.skip_initializer()
            else:
                raise DartSyntaxError(f"Unexpected '{tok.text}'", tok.start)
        return VariableDeclaration(
            kind=FIELD if container is not None else TOP_LEVEL_VARIABLE,
            name=names[0],
            end=semicolon.end,
            names=names,
            type_span=type_span,
            modifiers=frozenset(modifiers & _VARIABLE_MODIFIERS),
            has_var="var" in modifiers,
            semicolon=semicolon.start,
            **common,
        )

    def skip_initializer(self) -> None:
        """Skip an initializer expression up to the next top-level ``,`` or ``;``."""
        while True:
            tok = self.peek()
            if tok.kind == EOF:
                raise DartSyntaxError("Expected ';'", tok.start)
            if tok.kind == PUNCT and tok.text in (",", ";"):
                return
            if tok.is_opener():
                self.skip_group()
            elif tok.kind == PUNCT and tok.text == "<":
                after = self.skip_type_arguments(self.pos, _TYPE_ARGUMENT_LOOKAHEAD)
                if after is not None and self.tokens[after].text in ("(", "{", "[", "."):
                    self.pos = after
                else:
                    self.advance()
            else:
                self.advance()


def parse_dart(source: str) -> ParseResult:
    """Parse one Dart compilation unit into declaration nodes.

    Never raises for malformed input: scanning and structural problems are
    returned as ``error`` diagnostics with an empty unit.
    """
    try:
        tokens = scan(source)
        parser = _Parser(source, tokens)
        unit = parser.parse_unit()
    except (DartScanError, DartSyntaxError) as exc:
        log.debug("parse failed: %s", exc)
        return ParseResult(source, CompilationUnit(), [Diagnostic(ERROR, exc.message, exc.offset)])
    return ParseResult(source, unit, parser.diagnostics)
