"""Recursive-descent parser for native configuration syntax.

Builds a ``Body`` whose expressions use the closed node set in
``models.expressions``. Constructs without a dedicated node kind (binary
operators, function calls, splats, parentheses, indexing of non-references)
become ``Opaque`` nodes that keep their source range.

Function-call ranges stop before the closing parenthesis; consumers that
need the full call text extend the range by the following ``)``.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from ..models.body import Block, Body
from ..models.expressions import (
    AttrSegment,
    Conditional,
    Embedded,
    Expression,
    ForExpr,
    IndexSegment,
    Literal,
    ObjectCons,
    ObjectItem,
    Opaque,
    RootSegment,
    SourceRange,
    SplatSegment,
    Template,
    TemplateLiteral,
    Traversal,
    TupleCons,
    UnaryOp,
)
from .tokens import (
    ParseError,
    Token,
    TK_CHEREDOC,
    TK_CONTROL,
    TK_CQUOTE,
    TK_EOF,
    TK_IDENT,
    TK_INTERP,
    TK_NEWLINE,
    TK_NUMBER,
    TK_OHEREDOC,
    TK_OP,
    TK_OQUOTE,
    TK_QLIT,
    TK_SEQ_END,
    tokenize,
)

BINARY_LEVELS: List[Tuple[str, ...]] = [
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/", "%"),
]

KEYWORD_LITERALS = {"true": True, "false": False, "null": None}


class Parser:
    """Parser over the token list of one source document."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0
        # top of stack True: newlines are insignificant
        self._skip_newlines: List[bool] = [False]
        self._last_directive_strip = False

    # ------------------------------------------------------------------
    # token helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        if self._skip_newlines[-1]:
            while self.tokens[self.index].type == TK_NEWLINE:
                self.index += 1
        return self.tokens[self.index]

    def _next(self) -> Token:
        token = self._peek()
        if token.type != TK_EOF:
            self.index += 1
        return token

    def _error(self, msg: str, token: Optional[Token] = None) -> ParseError:
        token = token or self._peek()
        return ParseError(msg, token.line, token.col)

    @staticmethod
    def _is_op(token: Token, value: str) -> bool:
        return token.type == TK_OP and token.value == value

    @staticmethod
    def _is_keyword(token: Token, value: str) -> bool:
        return token.type == TK_IDENT and token.value == value

    def _expect_op(self, value: str) -> Token:
        token = self._next()
        if not self._is_op(token, value):
            raise self._error(f"expected {value!r}, found {token.value!r}", token)
        return token

    def _expect_ident(self, value: Optional[str] = None) -> Token:
        token = self._next()
        if token.type != TK_IDENT or (value is not None and token.value != value):
            expected = repr(value) if value else "identifier"
            raise self._error(f"expected {expected}, found {token.value!r}", token)
        return token

    def _expect_type(self, type_: str) -> Token:
        token = self._next()
        if token.type != type_:
            raise self._error(f"unexpected {token.value!r}", token)
        return token

    @staticmethod
    def _span(start: Token, end: int) -> SourceRange:
        return SourceRange(start.start, end, start.line, start.col)

    # ------------------------------------------------------------------
    # bodies
    # ------------------------------------------------------------------

    def parse_config(self) -> Body:
        body = self._parse_body(nested=False)
        self._expect_type(TK_EOF)
        body.source = self.source
        return body

    def _parse_body(self, nested: bool) -> Body:
        body = Body()
        while True:
            token = self._peek()
            if token.type == TK_NEWLINE:
                self._next()
                continue
            if token.type == TK_EOF:
                if nested:
                    raise self._error("missing '}' to close block", token)
                return body
            if nested and self._is_op(token, "}"):
                return body
            if token.type == TK_OQUOTE:
                self._parse_quoted_attribute(body)
                self._end_item(nested)
                continue
            if token.type != TK_IDENT:
                raise self._error(f"expected attribute or block, found {token.value!r}", token)

            name = self._next()
            if self._is_op(self._peek(), "="):
                self._next()
                expr = self._parse_expression()
                if name.value in body.attributes:
                    raise self._error(f"duplicate attribute {name.value!r}", name)
                body.set_attribute(name.value, expr, self._span(name, expr.range.end))
            else:
                body.blocks.append(self._parse_block(name))
            self._end_item(nested)

    def _parse_quoted_attribute(self, body: Body) -> None:
        # names that are not identifiers are written quoted
        open_token = self._next()
        name = self._parse_template(open_token)
        if not name.is_string_literal():
            raise self._error("attribute names cannot contain template sequences", open_token)
        self._expect_op("=")
        expr = self._parse_expression()
        key = name.literal_text()
        if key in body.attributes:
            raise self._error(f"duplicate attribute {key!r}", open_token)
        body.set_attribute(key, expr, self._span(open_token, expr.range.end))

    def _parse_block(self, type_token: Token) -> Block:
        labels: List[str] = []
        while True:
            token = self._peek()
            if token.type == TK_OQUOTE:
                self._next()
                label = self._parse_template(token)
                if not label.is_string_literal():
                    raise self._error("block labels cannot contain template sequences", token)
                labels.append(label.literal_text())
            elif token.type == TK_IDENT:
                labels.append(self._next().value)
            else:
                break
        self._expect_op("{")
        self._skip_newlines.append(False)
        body = self._parse_body(nested=True)
        close = self._expect_op("}")
        self._skip_newlines.pop()
        return Block(type_token.value, labels, body, range=self._span(type_token, close.end))

    def _end_item(self, nested: bool) -> None:
        token = self._peek()
        if token.type == TK_NEWLINE:
            self._next()
        elif token.type == TK_EOF or (nested and self._is_op(token, "}")):
            return
        else:
            raise self._error(f"expected newline after item, found {token.value!r}", token)

    # ------------------------------------------------------------------
    # expressions
    # ------------------------------------------------------------------

    def parse_expression_only(self) -> Expression:
        self._skip_newlines.append(True)
        expr = self._parse_expression()
        self._expect_type(TK_EOF)
        self._skip_newlines.pop()
        return expr

    def _parse_expression(self) -> Expression:
        condition = self._parse_binary(0)
        if not self._is_op(self._peek(), "?"):
            return condition
        self._next()
        then_part = self._parse_expression()
        self._expect_op(":")
        else_part = self._parse_expression()
        return Conditional(condition, then_part, else_part,
                           range=condition.range.merge(else_part.range))

    def _parse_binary(self, level: int) -> Expression:
        if level == len(BINARY_LEVELS):
            return self._parse_unary()
        left = self._parse_binary(level + 1)
        while True:
            token = self._peek()
            if token.type == TK_OP and token.value in BINARY_LEVELS[level]:
                self._next()
                right = self._parse_binary(level + 1)
                left = Opaque(kind="binary", range=left.range.merge(right.range))
            else:
                return left

    def _parse_unary(self) -> Expression:
        token = self._peek()
        if token.type == TK_OP and token.value in ("-", "!"):
            self._next()
            operand = self._parse_unary()
            return UnaryOp(token.value, operand, range=self._span(token, operand.range.end))
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        expr = self._parse_primary()
        while True:
            token = self._peek()
            if self._is_op(token, "."):
                self._next()
                step = self._next()
                if step.type == TK_IDENT:
                    segment = AttrSegment(step.value)
                elif step.type == TK_NUMBER and step.value.isdigit():
                    segment = IndexSegment(int(step.value))
                elif self._is_op(step, "*"):
                    segment = SplatSegment(full=False)
                else:
                    raise self._error("expected attribute name after '.'", step)
                expr = self._extend(expr, segment, step.end)
            elif self._is_op(token, "["):
                self._next()
                self._skip_newlines.append(True)
                if self._is_op(self._peek(), "*"):
                    self._next()
                    segment = SplatSegment(full=True)
                else:
                    key = self._parse_expression()
                    segment = None
                    if isinstance(key, Literal):
                        segment = IndexSegment(key.value)
                    elif isinstance(key, Template) and key.is_string_literal():
                        segment = IndexSegment(key.literal_text())
                close = self._expect_op("]")
                self._skip_newlines.pop()
                expr = self._extend(expr, segment, close.end)
            else:
                return expr

    def _extend(self, expr: Expression, segment, end: int) -> Expression:
        span = SourceRange(expr.range.start, end, expr.range.line, expr.range.column)
        if isinstance(segment, (AttrSegment, IndexSegment)) and isinstance(expr, Traversal):
            return Traversal(expr.segments + [segment], range=span)
        if isinstance(segment, SplatSegment) or (isinstance(expr, Opaque) and expr.kind == "splat"):
            return Opaque(kind="splat", range=span)
        return Opaque(kind="relative", range=span)

    def _parse_primary(self) -> Expression:
        token = self._next()

        if token.type == TK_NUMBER:
            text = token.value
            value = Decimal(text) if any(c in text for c in ".eE") else int(text)
            return Literal(value, range=self._span(token, token.end))

        if token.type == TK_IDENT:
            if token.value in KEYWORD_LITERALS:
                return Literal(KEYWORD_LITERALS[token.value], range=self._span(token, token.end))
            if self._is_op(self._peek(), "("):
                return self._parse_call(token)
            return Traversal([RootSegment(token.value)], range=self._span(token, token.end))

        if token.type in (TK_OQUOTE, TK_OHEREDOC):
            return self._parse_template(token)

        if self._is_op(token, "("):
            self._skip_newlines.append(True)
            self._parse_expression()
            close = self._expect_op(")")
            self._skip_newlines.pop()
            return Opaque(kind="parens", range=self._span(token, close.end))

        if self._is_op(token, "["):
            return self._parse_tuple(token)

        if self._is_op(token, "{"):
            return self._parse_object(token)

        raise self._error(f"unexpected {token.value!r} in expression", token)

    def _parse_call(self, name: Token) -> Expression:
        self._expect_op("(")
        self._skip_newlines.append(True)
        while not self._is_op(self._peek(), ")"):
            self._parse_expression()
            if self._is_op(self._peek(), "..."):
                self._next()
            if not self._is_op(self._peek(), ")"):
                self._expect_op(",")
        close = self._next()
        self._skip_newlines.pop()
        return Opaque(kind="call", range=self._span(name, close.start))

    def _parse_tuple(self, open_token: Token) -> Expression:
        self._skip_newlines.append(True)
        if self._is_keyword(self._peek(), "for"):
            expr = self._parse_for(open_token, "]")
            self._skip_newlines.pop()
            return expr
        items: List[Expression] = []
        while not self._is_op(self._peek(), "]"):
            items.append(self._parse_expression())
            if not self._is_op(self._peek(), "]"):
                self._expect_op(",")
        close = self._next()
        self._skip_newlines.pop()
        return TupleCons(items, range=self._span(open_token, close.end))

    def _parse_object(self, open_token: Token) -> Expression:
        self._skip_newlines.append(True)
        if self._is_keyword(self._peek(), "for"):
            expr = self._parse_for(open_token, "}")
            self._skip_newlines.pop()
            return expr
        self._skip_newlines[-1] = False
        items: List[ObjectItem] = []
        while True:
            token = self._peek()
            if token.type == TK_NEWLINE:
                self._next()
                continue
            if self._is_op(token, "}"):
                break
            key = self._parse_expression()
            separator = self._next()
            if not (self._is_op(separator, "=") or self._is_op(separator, ":")):
                raise self._error("expected '=' or ':' after object key", separator)
            value = self._parse_expression()
            items.append(ObjectItem(key, value))
            token = self._peek()
            if self._is_op(token, ","):
                self._next()
            elif token.type != TK_NEWLINE and not self._is_op(token, "}"):
                raise self._error("expected ',' or newline between object items", token)
        close = self._next()
        self._skip_newlines.pop()
        return ObjectCons(items, range=self._span(open_token, close.end))

    def _parse_for(self, open_token: Token, closer: str) -> Expression:
        self._expect_ident("for")
        key_var, val_var = self._parse_for_vars()
        collection = self._parse_expression()
        self._expect_op(":")
        key_expr = None
        grouped = False
        if closer == "}":
            key_expr = self._parse_expression()
            self._expect_op("=>")
        body = self._parse_expression()
        if closer == "}" and self._is_op(self._peek(), "..."):
            self._next()
            grouped = True
        cond = None
        if self._is_keyword(self._peek(), "if"):
            self._next()
            cond = self._parse_expression()
        close = self._expect_op(closer)
        return ForExpr(key_var, val_var, collection, body, key_expr=key_expr, cond=cond,
                       grouped=grouped, range=self._span(open_token, close.end))

    def _parse_for_vars(self) -> Tuple[Optional[str], str]:
        first = self._expect_ident().value
        second = None
        if self._is_op(self._peek(), ","):
            self._next()
            second = self._expect_ident().value
        self._expect_ident("in")
        if second is None:
            return None, first
        return first, second

    # ------------------------------------------------------------------
    # templates
    # ------------------------------------------------------------------

    def _parse_template(self, open_token: Token) -> Template:
        closing = TK_CQUOTE if open_token.type == TK_OQUOTE else TK_CHEREDOC
        self._skip_newlines.append(False)
        parts, interpolations, terminator, close = self._parse_template_parts(closing)
        self._skip_newlines.pop()
        if terminator is not None:
            raise self._error(f"unexpected %{{{terminator}}} directive", close)
        wrapped = len(parts) == 1 and interpolations == 1 and isinstance(parts[0], Embedded)
        return Template(parts, wrapped=wrapped, range=self._span(open_token, close.end))

    def _parse_template_parts(self, closing: str, strip_first: bool = False):
        """
        Parse template parts up to the closing token or a directive keyword.

        Returns:
            Tuple of (parts, interpolation count, terminating keyword or None,
            last token consumed)
        """
        parts: list = []
        interpolations = 0
        strip_next = strip_first

        def add_literal(text: str) -> None:
            nonlocal strip_next
            if strip_next:
                text = text.lstrip()
                strip_next = False
            if not text:
                return
            if parts and isinstance(parts[-1], TemplateLiteral):
                parts[-1] = TemplateLiteral(parts[-1].text + text)
            else:
                parts.append(TemplateLiteral(text))

        def strip_previous() -> None:
            if parts and isinstance(parts[-1], TemplateLiteral):
                text = parts[-1].text.rstrip()
                if text:
                    parts[-1] = TemplateLiteral(text)
                else:
                    parts.pop()

        while True:
            token = self.tokens[self.index]
            self.index += 1

            if token.type == closing:
                return parts, interpolations, None, token

            if token.type == TK_QLIT:
                add_literal(token.value)
                continue

            if token.type == TK_INTERP:
                if token.strip:
                    strip_previous()
                self._skip_newlines.append(True)
                expr = self._parse_expression()
                end = self._expect_type(TK_SEQ_END)
                self._skip_newlines.pop()
                parts.append(Embedded(expr))
                interpolations += 1
                strip_next = end.strip
                continue

            if token.type == TK_CONTROL:
                if token.strip:
                    strip_previous()
                self._skip_newlines.append(True)
                keyword = self._expect_ident()
                if keyword.value in ("else", "endif", "endfor"):
                    end = self._expect_type(TK_SEQ_END)
                    self._skip_newlines.pop()
                    return parts, interpolations, keyword.value, end
                if keyword.value == "if":
                    parts.append(Embedded(self._parse_if_directive(token, closing)))
                elif keyword.value == "for":
                    parts.append(Embedded(self._parse_for_directive(token, closing)))
                else:
                    raise self._error(f"unknown template directive {keyword.value!r}", keyword)
                strip_next = self._last_directive_strip
                continue

            if token.type == TK_EOF:
                raise self._error("unterminated template", token)
            raise self._error(f"unexpected {token.value!r} in template", token)

    def _parse_if_directive(self, open_token: Token, closing: str) -> Conditional:
        condition = self._parse_expression()
        end = self._expect_type(TK_SEQ_END)
        self._skip_newlines.pop()
        then_parts, _, terminator, close = self._parse_template_parts(closing, end.strip)
        else_template = None
        if terminator == "else":
            else_parts, _, terminator, close = self._parse_template_parts(closing, close.strip)
            else_template = Template(else_parts)
        if terminator != "endif":
            raise self._error("expected %{endif}", close)
        self._last_directive_strip = close.strip
        return Conditional(condition, Template(then_parts), else_template,
                           range=self._span(open_token, close.end))

    def _parse_for_directive(self, open_token: Token, closing: str) -> ForExpr:
        key_var, val_var = self._parse_for_vars()
        collection = self._parse_expression()
        end = self._expect_type(TK_SEQ_END)
        self._skip_newlines.pop()
        body_parts, _, terminator, close = self._parse_template_parts(closing, end.strip)
        if terminator != "endfor":
            raise self._error("expected %{endfor}", close)
        self._last_directive_strip = close.strip
        return ForExpr(key_var, val_var, collection, Template(body_parts),
                       range=self._span(open_token, close.end))


def parse_config(source: str) -> Body:
    """
    Parse configuration text into a Body.

    Raises:
        ParseError: On the first syntax error
    """
    return Parser(source).parse_config()


def parse_expression(source: str) -> Expression:
    """Parse a single standalone expression."""
    return Parser(source).parse_expression_only()
