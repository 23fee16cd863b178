"""Expression model for native configuration syntax.

The node kinds form a closed union. Anything the frontend cannot express
with the dedicated kinds is kept as an ``Opaque`` node that only remembers
where it came from in the source.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Union

from .values import GenericValue


@dataclass(frozen=True)
class SourceRange:
    """Half-open character range into the source text."""
    start: int
    end: int
    line: int = 1
    column: int = 1

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid source range {self.start}..{self.end}")

    def merge(self, other: "SourceRange") -> "SourceRange":
        """Smallest range covering both ranges."""
        first = self if self.start <= other.start else other
        return SourceRange(min(self.start, other.start), max(self.end, other.end),
                           first.line, first.column)


@dataclass
class Expression:
    """Base for all expression nodes."""
    range: Optional[SourceRange] = field(default=None, kw_only=True, compare=False)


@dataclass
class Literal(Expression):
    """Scalar literal: null, bool, number or string."""
    value: GenericValue


@dataclass
class RootSegment:
    """Root name of a traversal."""
    name: str


@dataclass
class AttrSegment:
    """``.name`` step."""
    name: str


@dataclass
class IndexSegment:
    """``[key]`` step with a literal key, or a legacy ``.0`` index."""
    key: Any


@dataclass
class SplatSegment:
    """``.*`` or ``[*]`` step."""
    full: bool = False


Segment = Union[RootSegment, AttrSegment, IndexSegment, SplatSegment]


@dataclass
class Traversal(Expression):
    """Reference through named path segments, starting at a root name."""
    segments: List[Segment]

    @property
    def root_name(self) -> str:
        return self.segments[0].name

    def is_bare_identifier(self) -> bool:
        """True for a plain root reference such as ``string`` or ``count``."""
        return len(self.segments) == 1 and isinstance(self.segments[0], RootSegment)

    @classmethod
    def from_reference(cls, reference: str, range: Optional[SourceRange] = None) -> "Traversal":
        """Build a traversal from dotted text such as ``var.name`` or ``list.0``."""
        names = reference.split(".")
        segments: List[Segment] = [RootSegment(names[0])]
        for name in names[1:]:
            if name.isdigit():
                segments.append(IndexSegment(int(name)))
            else:
                segments.append(AttrSegment(name))
        return cls(segments, range=range)


@dataclass
class TemplateLiteral:
    """Literal text inside a template, with escapes already resolved."""
    text: str


@dataclass
class Embedded:
    """An interpolated or directive sub-expression inside a template."""
    expr: Expression


TemplatePart = Union[TemplateLiteral, Embedded]


@dataclass
class Template(Expression):
    """String-valued expression made of literal text and embedded expressions.

    ``wrapped`` marks a template that is a single interpolation with no
    surrounding text, such as ``"${var.name}"``.
    """
    parts: List[TemplatePart]
    wrapped: bool = False

    def is_string_literal(self) -> bool:
        return all(isinstance(part, TemplateLiteral) for part in self.parts)

    def literal_text(self) -> str:
        return "".join(part.text for part in self.parts)


@dataclass
class Conditional(Expression):
    """``cond ? a : b`` or a template ``%{if}`` directive."""
    condition: Expression
    then_part: Expression
    else_part: Optional[Expression] = None


@dataclass
class ForExpr(Expression):
    """``[for ...]``, ``{for ...}`` or a template ``%{for}`` directive."""
    key_var: Optional[str]
    val_var: str
    collection: Expression
    body: Expression
    key_expr: Optional[Expression] = None
    cond: Optional[Expression] = None
    grouped: bool = False


@dataclass
class UnaryOp(Expression):
    """``-x`` or ``!x``."""
    operator: str
    operand: Expression

    def evaluate(self) -> GenericValue:
        """
        Evaluate a unary operator applied to a literal operand.

        Raises:
            TypeError: If the operand is not a literal of a matching type
        """
        if not isinstance(self.operand, Literal):
            raise TypeError("operand is not a literal")
        value = self.operand.value
        if self.operator == "-":
            if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
                raise TypeError(f"cannot negate {value!r}")
            return -value
        if self.operator == "!":
            if not isinstance(value, bool):
                raise TypeError(f"cannot invert {value!r}")
            return not value
        raise TypeError(f"unknown operator {self.operator}")


@dataclass
class TupleCons(Expression):
    """``[a, b, c]``."""
    items: List[Expression]


@dataclass
class ObjectItem:
    key: Expression
    value: Expression


@dataclass
class ObjectCons(Expression):
    """``{ key = value, ... }``."""
    items: List[ObjectItem]


@dataclass
class Opaque(Expression):
    """Expression preserved as verbatim source text.

    ``kind`` names what the frontend saw (``call``, ``binary``, ``splat``...);
    ``text`` holds the source when the node was built without a range.
    """
    kind: str = "raw"
    text: Optional[str] = None
