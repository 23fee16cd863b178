"""Expression serializer: configuration expressions to JSON-safe values."""

import logging
from typing import Any, Dict, List, Optional

from ..models.expressions import (
    Conditional,
    Expression,
    ForExpr,
    Literal,
    ObjectCons,
    Opaque,
    Template,
    TemplateLiteral,
    Traversal,
    TupleCons,
    UnaryOp,
)
from ..error_handler import ErrorHandler
from ..io.hcl_writer import HCLWriter
from ..models.values import GenericValue, number_text
from ..types import ErrorType


def escape_literal(text: str) -> str:
    """
    Escape sequences that would read as live template markup.

    ``${`` becomes ``$${`` and ``%{`` becomes ``%%{`` so literal text survives
    being parsed again as a template.
    """
    return text.replace("${", "$${").replace("%{", "%%{")


class ExpressionSerializer:
    """
    Serializer for expression trees.

    Turns every expression into a JSON-safe generic value. The conversion is
    total: anything that cannot be decomposed is kept as its source text
    wrapped in ``${...}``.
    """

    def __init__(self, source: Optional[str] = None,
                 logger: Optional[logging.Logger] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the expression serializer.

        Args:
            source: Text the expressions were parsed from, used for verbatim
                source extraction
            logger: Optional logger instance
            error_handler: Optional ErrorHandler that records opaque fallbacks
        """
        self.source = source
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler

    def serialize(self, expr: Expression) -> GenericValue:
        """
        Convert an expression into a generic value.

        Args:
            expr: Expression to convert

        Returns:
            Generic value; never raises for well-formed trees
        """
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Traversal):
            # bare identifiers such as `string` round-trip as plain names
            if expr.is_bare_identifier():
                return expr.root_name
            return self.wrap(expr)

        if isinstance(expr, UnaryOp):
            return self._serialize_unary(expr)

        if isinstance(expr, Template):
            if expr.wrapped:
                return self.serialize(expr.parts[0].expr)
            return self.serialize_template(expr)

        if isinstance(expr, TupleCons):
            return [self.serialize(item) for item in expr.items]

        if isinstance(expr, ObjectCons):
            result: Dict[str, Any] = {}
            for item in expr.items:
                result[self.convert_key(item.key)] = self.serialize(item.value)
            return result

        return self._opaque(expr)

    def _opaque(self, expr: Expression) -> str:
        text = self.wrap(expr)
        if self.error_handler is not None:
            kind = expr.kind if isinstance(expr, Opaque) else type(expr).__name__
            self.error_handler.record_fallback(text, f"{kind} expression kept as source text",
                                               ErrorType.EXPRESSION)
        return text

    def _serialize_unary(self, expr: UnaryOp) -> GenericValue:
        if not isinstance(expr.operand, Literal):
            return self._opaque(expr)
        try:
            return expr.evaluate()
        except TypeError as e:
            self.logger.debug(f"Keeping unary expression as source text: {e}")
            return self._opaque(expr)

    def serialize_template(self, template: Template) -> str:
        """Render a template as a string with literal markup escaped."""
        if template.is_string_literal():
            return escape_literal(template.literal_text())
        pieces: List[str] = []
        for part in template.parts:
            if isinstance(part, TemplateLiteral):
                pieces.append(escape_literal(part.text))
            else:
                pieces.append(self.serialize_string_part(part.expr))
        return "".join(pieces)

    def serialize_string_part(self, expr: Expression) -> str:
        """Render one embedded template part as text."""
        if isinstance(expr, Literal):
            # a bare `null` key arrives here as a null literal
            if expr.value is None:
                return "null"
            if isinstance(expr.value, bool):
                return "true" if expr.value else "false"
            if isinstance(expr.value, str):
                return escape_literal(expr.value)
            return number_text(expr.value)
        if isinstance(expr, Template):
            if expr.wrapped:
                return self.serialize_string_part(expr.parts[0].expr)
            return self.serialize_template(expr)
        if isinstance(expr, Conditional):
            return self._template_conditional(expr)
        if isinstance(expr, ForExpr):
            return self._template_for(expr)
        return self.wrap(expr)

    def convert_key(self, key: Expression) -> str:
        """Resolve an object constructor key to its string form."""
        if isinstance(key, Traversal):
            return self.range_source(key)
        return self.serialize_string_part(key)

    def _template_conditional(self, expr: Conditional) -> str:
        pieces = ["%{if ", self.range_source(expr.condition), "}"]
        pieces.append(self.serialize_string_part(expr.then_part))
        if expr.else_part is not None:
            else_text = self.serialize_string_part(expr.else_part)
            if else_text:
                pieces.append("%{else}")
                pieces.append(else_text)
        pieces.append("%{endif}")
        return "".join(pieces)

    def _template_for(self, expr: ForExpr) -> str:
        pieces = ["%{for "]
        if expr.key_var:
            pieces.append(expr.key_var + ", ")
        pieces.append(expr.val_var)
        pieces.append(" in ")
        pieces.append(self.range_source(expr.collection))
        pieces.append("}")
        pieces.append(self.serialize_string_part(expr.body))
        pieces.append("%{endfor}")
        return "".join(pieces)

    def wrap(self, expr: Expression) -> str:
        """Wrap an expression's verbatim source text in ``${...}``."""
        return "${" + self.range_source(expr) + "}"

    def range_source(self, expr: Expression) -> str:
        """
        Extract the verbatim source text of an expression.

        Call ranges stop before their closing parenthesis, so a ``)``
        directly after the range is included.
        """
        if expr.range is not None and self.source is not None:
            end = expr.range.end
            if end < len(self.source) and self.source[end] == ")":
                end += 1
            return self.source[expr.range.start:end]
        if isinstance(expr, Opaque) and expr.text is not None:
            return expr.text
        return HCLWriter().render_expression(expr)
