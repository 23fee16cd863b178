"""Writer that formats configuration bodies as native syntax text."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..models.body import Block, Body
from ..models.expressions import (
    AttrSegment,
    Conditional,
    Expression,
    ForExpr,
    IndexSegment,
    Literal,
    ObjectCons,
    Opaque,
    RootSegment,
    SplatSegment,
    Template,
    TemplateLiteral,
    Traversal,
    TupleCons,
    UnaryOp,
)
from ..models.values import number_text
from ..types import ConversionError, ErrorType

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

# bare object keys that would read as something else
RESERVED_KEYS = {"true", "false", "null", "for", "in", "if"}

_STRING_ESCAPES: Dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def is_identifier(text: str) -> bool:
    return bool(_IDENTIFIER_RE.match(text))


def escape_string(text: str) -> str:
    """Escape text for use between double quotes, including template markup."""
    out: List[str] = []
    for ch in text:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out).replace("${", "$${").replace("%{", "%%{")


def quote(text: str) -> str:
    return '"' + escape_string(text) + '"'


class HCLWriter:
    """
    Formatter for configuration bodies.

    Attributes come first with their ``=`` signs aligned, then blocks, each
    separated by a blank line. Nested bodies and multi-line objects are
    indented by two spaces per level.
    """

    def __init__(self, indent: str = "  ", source: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the writer.

        Args:
            indent: Indentation unit
            source: Source text used to render opaque expressions that only
                carry a range
            logger: Optional logger instance
        """
        self.indent = indent
        self.source = source
        self.logger = logger or logging.getLogger(__name__)

    def render(self, body: Body) -> str:
        """Render a whole document body."""
        if body.source is not None and self.source is None:
            self.source = body.source
        lines = self._body_lines(body, 0)
        return "\n".join(lines) + "\n" if lines else ""

    def write(self, body: Body, output_path: Union[str, Path]) -> int:
        """
        Render a body into a file.

        Returns:
            Number of bytes written

        Raises:
            ConversionError: If the file cannot be written
        """
        text = self.render(body)
        try:
            path = Path(output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise ConversionError(
                f"Failed to write {output_path}: {e}",
                ErrorType.OPTIONS,
                context={"output_path": str(output_path)}
            )
        size = len(text.encode("utf-8"))
        self.logger.info(f"Wrote {size} bytes to {output_path}")
        return size

    def _body_lines(self, body: Body, level: int) -> List[str]:
        prefix = self.indent * level
        lines: List[str] = []

        rendered = [(self._attribute_name(name), self.render_expression(attr.expr, level))
                    for name, attr in body.attributes.items()]
        for group in self._alignment_groups(rendered):
            width = max(len(name) for name, _ in group)
            for name, value in group:
                pad = " " * (width - len(name)) if "\n" not in value else ""
                lines.append(f"{prefix}{name}{pad} = {value}")

        for block in body.blocks:
            if lines:
                lines.append("")
            lines.extend(self._block_lines(block, level))
        return lines

    @staticmethod
    def _attribute_name(name: str) -> str:
        return name if is_identifier(name) else quote(name)

    @staticmethod
    def _alignment_groups(rendered):
        groups = []
        current = []
        for name, value in rendered:
            if "\n" in value:
                if current:
                    groups.append(current)
                groups.append([(name, value)])
                current = []
            else:
                current.append((name, value))
        if current:
            groups.append(current)
        return groups

    def _block_lines(self, block: Block, level: int) -> List[str]:
        prefix = self.indent * level
        header = " ".join([block.type] + [quote(label) for label in block.labels])
        inner = self._body_lines(block.body, level + 1)
        return [f"{prefix}{header} {{"] + inner + [f"{prefix}}}"]

    def render_expression(self, expr: Expression, level: int = 0) -> str:
        """Render one expression; multi-line objects indent from level."""
        if isinstance(expr, Literal):
            return self._render_literal(expr.value)
        if isinstance(expr, Traversal):
            return self._render_traversal(expr)
        if isinstance(expr, Template):
            return '"' + self._render_template_body(expr, level) + '"'
        if isinstance(expr, UnaryOp):
            return expr.operator + self.render_expression(expr.operand, level)
        if isinstance(expr, TupleCons):
            return "[" + ", ".join(self.render_expression(item, level) for item in expr.items) + "]"
        if isinstance(expr, ObjectCons):
            return self._render_object(expr, level)
        if isinstance(expr, Conditional):
            return (self.render_expression(expr.condition, level) + " ? "
                    + self.render_expression(expr.then_part, level) + " : "
                    + self.render_expression(expr.else_part, level))
        if isinstance(expr, ForExpr):
            return self._render_for(expr, level)
        if isinstance(expr, Opaque):
            return self._render_opaque(expr)
        raise TypeError(f"cannot render {type(expr).__name__}")

    def _render_literal(self, value) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return quote(value)
        return number_text(value)

    def _render_traversal(self, expr: Traversal) -> str:
        pieces: List[str] = []
        for segment in expr.segments:
            if isinstance(segment, RootSegment):
                pieces.append(segment.name)
            elif isinstance(segment, AttrSegment):
                pieces.append("." + segment.name)
            elif isinstance(segment, IndexSegment):
                if isinstance(segment.key, str):
                    pieces.append("[" + quote(segment.key) + "]")
                else:
                    pieces.append("[" + self._render_literal(segment.key) + "]")
            elif isinstance(segment, SplatSegment):
                pieces.append("[*]" if segment.full else ".*")
        return "".join(pieces)

    def _render_template_body(self, template: Template, level: int) -> str:
        pieces: List[str] = []
        for part in template.parts:
            if isinstance(part, TemplateLiteral):
                pieces.append(escape_string(part.text))
            elif isinstance(part.expr, Conditional) and not template.wrapped:
                pieces.append(self._render_if_directive(part.expr, level))
            elif isinstance(part.expr, ForExpr) and isinstance(part.expr.body, Template):
                pieces.append(self._render_for_directive(part.expr, level))
            else:
                pieces.append("${" + self.render_expression(part.expr, level) + "}")
        return "".join(pieces)

    def _directive_branch(self, expr: Expression, level: int) -> str:
        if isinstance(expr, Template):
            return self._render_template_body(expr, level)
        return "${" + self.render_expression(expr, level) + "}"

    def _render_if_directive(self, expr: Conditional, level: int) -> str:
        text = "%{if " + self.render_expression(expr.condition, level) + "}"
        text += self._directive_branch(expr.then_part, level)
        if expr.else_part is not None:
            text += "%{else}" + self._directive_branch(expr.else_part, level)
        return text + "%{endif}"

    def _render_for_directive(self, expr: ForExpr, level: int) -> str:
        names = f"{expr.key_var}, {expr.val_var}" if expr.key_var else expr.val_var
        text = "%{for " + names + " in " + self.render_expression(expr.collection, level) + "}"
        return text + self._directive_branch(expr.body, level) + "%{endfor}"

    def _render_object(self, expr: ObjectCons, level: int) -> str:
        if not expr.items:
            return "{}"
        prefix = self.indent * (level + 1)
        rendered = [(self._render_key(item.key), self.render_expression(item.value, level + 1))
                    for item in expr.items]
        lines = ["{"]
        for group in self._alignment_groups(rendered):
            width = max(len(key) for key, _ in group)
            for key, value in group:
                pad = " " * (width - len(key)) if "\n" not in value else ""
                lines.append(f"{prefix}{key}{pad} = {value}")
        lines.append(self.indent * level + "}")
        return "\n".join(lines)

    def _render_key(self, key: Expression) -> str:
        name = None
        if isinstance(key, Literal) and isinstance(key.value, str):
            name = key.value
        elif isinstance(key, Template) and key.is_string_literal():
            name = key.literal_text()
        if name is not None:
            if is_identifier(name) and name not in RESERVED_KEYS:
                return name
            return quote(name)
        if isinstance(key, Traversal):
            return self._render_traversal(key)
        return "(" + self.render_expression(key) + ")"

    def _render_for(self, expr: ForExpr, level: int) -> str:
        names = f"{expr.key_var}, {expr.val_var}" if expr.key_var else expr.val_var
        head = "for " + names + " in " + self.render_expression(expr.collection, level) + " : "
        tail = ""
        if expr.cond is not None:
            tail = " if " + self.render_expression(expr.cond, level)
        if expr.key_expr is not None:
            value = self.render_expression(expr.body, level)
            if expr.grouped:
                value += "..."
            return ("{" + head + self.render_expression(expr.key_expr, level)
                    + " => " + value + tail + "}")
        return "[" + head + self.render_expression(expr.body, level) + tail + "]"

    def _render_opaque(self, expr: Opaque) -> str:
        if expr.text is not None:
            return expr.text
        if expr.range is not None and self.source is not None:
            end = expr.range.end
            if end < len(self.source) and self.source[end] == ")":
                end += 1
            return self.source[expr.range.start:end]
        raise ValueError(f"opaque {expr.kind} expression has no source text")
