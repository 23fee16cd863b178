"""Tokenizer for native configuration syntax.

Quoted strings and heredocs are scanned as templates: literal runs become
``QLIT`` tokens with escapes resolved, and ``${``/``%{`` sequences switch back
to normal scanning until the matching ``}``. Offsets are character offsets
into the source text.
"""

import re
from typing import List, Optional

# Token type constants
TK_IDENT = "IDENT"
TK_NUMBER = "NUMBER"
TK_OP = "OP"
TK_NEWLINE = "NEWLINE"
TK_OQUOTE = "OQUOTE"
TK_CQUOTE = "CQUOTE"
TK_OHEREDOC = "OHEREDOC"
TK_CHEREDOC = "CHEREDOC"
TK_QLIT = "QLIT"
TK_INTERP = "INTERP"
TK_CONTROL = "CONTROL"
TK_SEQ_END = "SEQ_END"
TK_EOF = "EOF"

# Multi-character operators, longest first for greedy matching
MULTI_OPS: List[str] = ["...", "==", "!=", "<=", ">=", "&&", "||", "=>"]

SINGLE_OPS = set("+-*/%<>!=?:.,()[]{}")

ESCAPE_MAP = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "\\": "\\",
}

_HEREDOC_RE = re.compile(r"<<(-?)([A-Za-z_][A-Za-z0-9_-]*)\r?\n")


class ParseError(Exception):
    """Error while tokenizing or parsing configuration text."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg = msg
        self.line = line
        self.col = col
        super().__init__(f"{msg} at line {line}, column {col}")


class Token:
    """A token with type, value and source position."""

    def __init__(self, type_: str, value: str, start: int, end: int,
                 line: int, col: int, strip: bool = False):
        self.type = type_
        self.value = value
        self.start = start
        self.end = end
        self.line = line
        self.col = col
        self.strip = strip

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, {self.line}, {self.col})"


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c in "_-"


class Lexer:
    """Produces a flat token list ending with ``TK_EOF``."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.limit = len(source)
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        self._scan_normal(in_template=False)
        self.tokens.append(Token(TK_EOF, "", self.pos, self.pos, self.line, self.col))
        return self.tokens

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.source[self.pos] == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.pos += 1

    def _startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.pos, self.limit)

    def _emit(self, type_: str, value: str, start: int, line: int, col: int,
              strip: bool = False) -> Token:
        token = Token(type_, value, start, self.pos, line, col, strip)
        self.tokens.append(token)
        return token

    def _scan_normal(self, in_template: bool) -> None:
        depth = 0
        while self.pos < self.limit:
            c = self.source[self.pos]
            start, line, col = self.pos, self.line, self.col

            if c == "\n":
                self._advance()
                self._emit(TK_NEWLINE, "\n", start, line, col)
                continue

            if c in " \t\r":
                self._advance()
                continue

            if c == "#" or self._startswith("//"):
                while self.pos < self.limit and self.source[self.pos] != "\n":
                    self._advance()
                continue

            if self._startswith("/*"):
                end = self.source.find("*/", self.pos + 2, self.limit)
                if end < 0:
                    raise ParseError("unterminated block comment", line, col)
                self._advance(end + 2 - self.pos)
                continue

            if in_template and depth == 0:
                if self._startswith("~}"):
                    self._advance(2)
                    self._emit(TK_SEQ_END, "}", start, line, col, strip=True)
                    return
                if c == "}":
                    self._advance()
                    self._emit(TK_SEQ_END, "}", start, line, col)
                    return

            if c.isdigit():
                self._scan_number()
                continue

            if _is_ident_start(c):
                while self.pos < self.limit and _is_ident_char(self.source[self.pos]):
                    self._advance()
                self._emit(TK_IDENT, self.source[start:self.pos], start, line, col)
                continue

            if c == '"':
                self._advance()
                self._emit(TK_OQUOTE, '"', start, line, col)
                self._scan_template(heredoc=False)
                continue

            if self._startswith("<<"):
                self._scan_heredoc()
                continue

            matched = False
            for op in MULTI_OPS:
                if self._startswith(op):
                    self._advance(len(op))
                    self._emit(TK_OP, op, start, line, col)
                    matched = True
                    break
            if matched:
                continue

            if c in SINGLE_OPS:
                if c == "{":
                    depth += 1
                elif c == "}":
                    depth -= 1
                self._advance()
                self._emit(TK_OP, c, start, line, col)
                continue

            raise ParseError(f"unexpected character {c!r}", line, col)

        if in_template:
            raise ParseError("unterminated template sequence", self.line, self.col)

    def _scan_number(self) -> None:
        start, line, col = self.pos, self.line, self.col
        while self.pos < self.limit and self.source[self.pos].isdigit():
            self._advance()
        # "a.0.1" is two legacy index steps, not a fraction
        after_dot = self.tokens and self.tokens[-1].type == TK_OP and self.tokens[-1].value == "."
        if (not after_dot and self._startswith(".") and self.pos + 1 < self.limit
                and self.source[self.pos + 1].isdigit()):
            self._advance()
            while self.pos < self.limit and self.source[self.pos].isdigit():
                self._advance()
        if not after_dot and self.pos < self.limit and self.source[self.pos] in "eE":
            self._advance()
            if self.pos < self.limit and self.source[self.pos] in "+-":
                self._advance()
            if self.pos >= self.limit or not self.source[self.pos].isdigit():
                raise ParseError("invalid number exponent", line, col)
            while self.pos < self.limit and self.source[self.pos].isdigit():
                self._advance()
        self._emit(TK_NUMBER, self.source[start:self.pos], start, line, col)

    def _scan_template(self, heredoc: bool, indent: int = 0) -> None:
        """Scan template content up to the closing quote or the heredoc limit."""
        chars: List[str] = []
        lit_start, lit_line, lit_col = self.pos, self.line, self.col
        at_line_start = heredoc

        def flush() -> None:
            nonlocal chars, at_line_start
            if chars:
                text = "".join(chars)
                if indent:
                    text = _dedent(text, indent, at_line_start)
                self.tokens.append(Token(TK_QLIT, text, lit_start, self.pos, lit_line, lit_col))
            chars = []
            at_line_start = False

        while True:
            if self.pos >= self.limit:
                if heredoc:
                    flush()
                    return
                raise ParseError("unterminated string literal", lit_line, lit_col)

            c = self.source[self.pos]
            start, line, col = self.pos, self.line, self.col

            if not heredoc and c == '"':
                flush()
                self._advance()
                self._emit(TK_CQUOTE, '"', start, line, col)
                return

            if not heredoc and c == "\n":
                raise ParseError("unterminated string literal", lit_line, lit_col)

            if not heredoc and c == "\\":
                chars.append(self._scan_escape())
                continue

            if self._startswith("$${") or self._startswith("%%{"):
                chars.append(c + "{")
                self._advance(3)
                continue

            if self._startswith("${") or self._startswith("%{"):
                flush()
                self._advance(2)
                strip = self._startswith("~")
                if strip:
                    self._advance()
                kind = TK_INTERP if c == "$" else TK_CONTROL
                self._emit(kind, c + "{", start, line, col, strip=strip)
                self._scan_normal(in_template=True)
                lit_start, lit_line, lit_col = self.pos, self.line, self.col
                continue

            chars.append(c)
            self._advance()

    def _scan_escape(self) -> str:
        line, col = self.line, self.col
        self._advance()
        if self.pos >= self.limit:
            raise ParseError("unexpected end of string in escape", line, col)
        c = self.source[self.pos]
        if c in ESCAPE_MAP:
            self._advance()
            return ESCAPE_MAP[c]
        if c in "uU":
            width = 4 if c == "u" else 8
            digits = self.source[self.pos + 1:self.pos + 1 + width]
            if len(digits) != width or not all(d in "0123456789abcdefABCDEF" for d in digits):
                raise ParseError(f"invalid \\{c} escape", line, col)
            self._advance(1 + width)
            return chr(int(digits, 16))
        raise ParseError(f"invalid escape: \\{c}", line, col)

    def _scan_heredoc(self) -> None:
        start, line, col = self.pos, self.line, self.col
        match = _HEREDOC_RE.match(self.source, self.pos, self.limit)
        if not match:
            raise ParseError("invalid heredoc introducer", line, col)
        flush_indent = bool(match.group(1))
        marker = match.group(2)
        self._advance(match.end() - self.pos - 1)
        self._emit(TK_OHEREDOC, marker, start, line, col)
        self._advance()  # newline after the introducer

        content_start = self.pos
        cursor = content_start
        content_end = -1
        while cursor <= self.limit:
            newline = self.source.find("\n", cursor, self.limit)
            line_end = self.limit if newline < 0 else newline
            if self.source[cursor:line_end].strip() == marker:
                content_end = cursor
                break
            if newline < 0:
                break
            cursor = newline + 1
        if content_end < 0:
            raise ParseError(f"unterminated heredoc {marker}", line, col)

        indent = 0
        if flush_indent:
            indent = _common_indent(self.source[content_start:content_end])

        outer_limit = self.limit
        self.limit = content_end
        self._scan_template(heredoc=True, indent=indent)
        self.limit = outer_limit

        end_start, end_line, end_col = self.pos, self.line, self.col
        while self.pos < self.limit and self.source[self.pos] != "\n":
            self._advance()
        self._emit(TK_CHEREDOC, marker, end_start, end_line, end_col)


def _common_indent(text: str) -> int:
    widths = [len(line) - len(line.lstrip(" \t")) for line in text.split("\n") if line.strip()]
    return min(widths) if widths else 0


def _dedent(text: str, indent: int, at_line_start: bool) -> str:
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if i == 0 and not at_line_start:
            continue
        width = len(line) - len(line.lstrip(" \t"))
        lines[i] = line[min(width, indent):]
    return "\n".join(lines)


def tokenize(source: str) -> List[Token]:
    """Tokenize configuration source into a flat list ending with TK_EOF."""
    return Lexer(source).tokenize()
