"""Data models for the HCL Transformer."""

from .body import Attribute, Block, Body
from .expressions import (
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

__all__ = [
    "Attribute", "Block", "Body",
    "AttrSegment", "Conditional", "Embedded", "Expression", "ForExpr",
    "IndexSegment", "Literal", "ObjectCons", "ObjectItem", "Opaque",
    "RootSegment", "SourceRange", "SplatSegment", "Template",
    "TemplateLiteral", "Traversal", "TupleCons", "UnaryOp",
]
