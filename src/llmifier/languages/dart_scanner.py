"""Dart lexical scanner (hand-written, no grammar dependency).

Produces a flat token stream sufficient for declaration-level parsing.
Comments are not emitted as tokens: every token carries the run of comments
that precede it, which is where documentation comments are looked up.
"""

from __future__ import annotations

from dataclasses import dataclass

# Token kinds
IDENT = "ident"
NUMBER = "number"
STRING = "string"
PUNCT = "punct"
EOF = "eof"

# Comment kinds
LINE_COMMENT = "line"
BLOCK_COMMENT = "block"
DOC_LINE = "doc_line"
DOC_BLOCK = "doc_block"

# Longest match first. ">>" and ">=" are never merged so that nested
# generic argument lists always close on single ">" tokens.
_PUNCTUATORS = (
    "...?",
    "...", "??=", "<<=", "~/=", "&&=", "||=",
    "=>", "==", "!=", "<=", "&&", "||", "??", "?.", "..", "++", "--",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "~/", "<<",
)
_SINGLE_PUNCT = frozenset("{}()[];,.:?=<>!+-*/%&|^~@#")
_OPENERS = {"(": ")", "[": "]", "{": "}"}


class DartScanError(ValueError):
    """Raised when the source cannot be tokenized."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (offset {offset})")
        self.message = message
        self.offset = offset


@dataclass(frozen=True)
class Comment:
    kind: str
    start: int
    end: int
    text: str

    @property
    def is_doc(self) -> bool:
        return self.kind in (DOC_LINE, DOC_BLOCK)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start: int
    end: int
    comments: tuple[Comment, ...] = ()

    def is_word(self) -> bool:
        return self.kind == IDENT

    def is_opener(self) -> bool:
        return self.kind == PUNCT and self.text in _OPENERS


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


class _Scanner:
    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.pending: list[Comment] = []
        self.tokens: list[Token] = []

    # ── driver ────────────────────────────────────────────────────────

    def run(self) -> list[Token]:
        src = self.source
        if src.startswith("\ufeff"):
            self.pos = 1
        if src.startswith("#!", self.pos):
            newline = src.find("\n", self.pos)
            self.pos = self.length if newline < 0 else newline + 1

        while True:
            self._skip_trivia()
            if self.pos >= self.length:
                self._emit(EOF, self.length, self.length)
                return self.tokens
            ch = src[self.pos]
            start = self.pos
            if ch == "r" and self.pos + 1 < self.length and src[self.pos + 1] in "'\"":
                self.pos = self._scan_string(self.pos)
                self._emit(STRING, start, self.pos)
            elif ch in "'\"":
                self.pos = self._scan_string(self.pos)
                self._emit(STRING, start, self.pos)
            elif _is_ident_start(ch):
                self.pos += 1
                while self.pos < self.length and _is_ident_part(src[self.pos]):
                    self.pos += 1
                self._emit(IDENT, start, self.pos)
            elif ch.isdigit() or (ch == "." and self._peek_char(1).isdigit()):
                self.pos = self._scan_number(self.pos)
                self._emit(NUMBER, start, self.pos)
            else:
                self.pos = self._scan_punct(self.pos)
                self._emit(PUNCT, start, self.pos)

    def _emit(self, kind: str, start: int, end: int) -> None:
        self.tokens.append(
            Token(kind, self.source[start:end], start, end, tuple(self.pending))
        )
        self.pending = []

    def _peek_char(self, ahead: int) -> str:
        index = self.pos + ahead
        return self.source[index] if index < self.length else ""

    # ── trivia ────────────────────────────────────────────────────────

    def _skip_trivia(self) -> None:
        src = self.source
        while self.pos < self.length:
            ch = src[self.pos]
            if ch.isspace():
                self.pos += 1
            elif src.startswith("//", self.pos):
                start = self.pos
                newline = src.find("\n", start)
                self.pos = self.length if newline < 0 else newline
                text = src[start:self.pos]
                kind = DOC_LINE if text.startswith("///") else LINE_COMMENT
                self.pending.append(Comment(kind, start, self.pos, text))
            elif src.startswith("/*", self.pos):
                start = self.pos
                self.pos = self._skip_block_comment(start)
                text = src[start:self.pos]
                is_doc = text.startswith("/**") and text != "/**/"
                kind = DOC_BLOCK if is_doc else BLOCK_COMMENT
                self.pending.append(Comment(kind, start, self.pos, text))
            else:
                return

    def _skip_block_comment(self, start: int) -> int:
        src = self.source
        depth = 0
        i = start
        while i < self.length:
            if src.startswith("/*", i):
                depth += 1
                i += 2
            elif src.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        raise DartScanError("Unterminated block comment", start)

    # ── literals ──────────────────────────────────────────────────────

    def _scan_string(self, start: int) -> int:
        src = self.source
        i = start
        raw = src[i] == "r"
        if raw:
            i += 1
        quote = src[i]
        delimiter = quote * 3 if src.startswith(quote * 3, i) else quote
        i += len(delimiter)
        while True:
            if i >= self.length:
                raise DartScanError("Unterminated string literal", start)
            if src.startswith(delimiter, i):
                return i + len(delimiter)
            ch = src[i]
            if ch == "\n" and len(delimiter) == 1:
                raise DartScanError("Unterminated string literal", start)
            if ch == "\\" and not raw:
                i += 2
            elif ch == "$" and not raw and src.startswith("{", i + 1):
                i = self._skip_interpolation(i + 2)
            else:
                i += 1

    def _skip_interpolation(self, start: int) -> int:
        """Skip a ``${...}`` body starting after the brace, return the index after ``}``."""
        src = self.source
        depth = 1
        i = start
        while i < self.length:
            ch = src[i]
            if ch in "'\"" or (ch == "r" and src[i + 1:i + 2] in ("'", '"')
                               and not _is_ident_part(src[i - 1])):
                i = self._scan_string(i)
            elif src.startswith("//", i):
                newline = src.find("\n", i)
                i = self.length if newline < 0 else newline
            elif src.startswith("/*", i):
                i = self._skip_block_comment(i)
            elif ch == "{":
                depth += 1
                i += 1
            elif ch == "}":
                depth -= 1
                i += 1
                if depth == 0:
                    return i
            else:
                i += 1
        raise DartScanError("Unterminated string interpolation", start)

    def _scan_number(self, start: int) -> int:
        src = self.source
        i = start
        if src.startswith(("0x", "0X"), i):
            i += 2
            while i < self.length and (src[i] in "0123456789abcdefABCDEF_"):
                i += 1
            return i
        while i < self.length and (src[i].isdigit() or src[i] == "_"):
            i += 1
        if i + 1 < self.length and src[i] == "." and src[i + 1].isdigit():
            i += 1
            while i < self.length and (src[i].isdigit() or src[i] == "_"):
                i += 1
        if i < self.length and src[i] in "eE":
            j = i + 1
            if j < self.length and src[j] in "+-":
                j += 1
            if j < self.length and src[j].isdigit():
                i = j
                while i < self.length and src[i].isdigit():
                    i += 1
        return i

    def _scan_punct(self, start: int) -> int:
        src = self.source
        for punct in _PUNCTUATORS:
            if src.startswith(punct, start):
                return start + len(punct)
        if src[start] in _SINGLE_PUNCT:
            return start + 1
        raise DartScanError(f"Unexpected character {src[start]!r}", start)


def scan(source: str) -> list[Token]:
    """Tokenize Dart *source*. The last token is always of kind ``eof``.

    Raises DartScanError on unterminated literals or unknown characters.
    """
    return _Scanner(source).run()


def closing_bracket(opener: str) -> str:
    return _OPENERS[opener]
