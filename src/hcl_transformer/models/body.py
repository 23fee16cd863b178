"""Body, block and attribute models for native configuration documents."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .expressions import Expression, SourceRange


@dataclass
class Attribute:
    """A ``name = expr`` assignment."""
    name: str
    expr: Expression
    range: Optional[SourceRange] = None


@dataclass
class Block:
    """A typed block with positional labels and a nested body."""
    type: str
    labels: List[str] = field(default_factory=list)
    body: "Body" = field(default_factory=lambda: Body())
    range: Optional[SourceRange] = None

    def __post_init__(self):
        if not self.type:
            raise ValueError("block type cannot be empty")


@dataclass
class Body:
    """
    Attributes and blocks of a document or of a block.

    An attribute name appears at most once; any number of blocks may share
    a type. ``source`` holds the text the body was parsed from, if any.
    """
    attributes: Dict[str, Attribute] = field(default_factory=dict)
    blocks: List[Block] = field(default_factory=list)
    source: Optional[str] = field(default=None, repr=False, compare=False)

    def set_attribute(self, name: str, expr: Expression,
                      range: Optional[SourceRange] = None) -> Attribute:
        """Add or replace an attribute, keeping its original position on replace."""
        attribute = Attribute(name, expr, range)
        self.attributes[name] = attribute
        return attribute

    def append_block(self, type: str, labels: Optional[List[str]] = None) -> Block:
        """Append a new empty block and return it."""
        block = Block(type, list(labels or []))
        self.blocks.append(block)
        return block

    def blocks_of_type(self, type: str) -> List[Block]:
        return [block for block in self.blocks if block.type == type]

    def walk_blocks(self) -> Iterator[Block]:
        """Depth-first iteration over every nested block."""
        for block in self.blocks:
            yield block
            yield from block.body.walk_blocks()

    def is_empty(self) -> bool:
        return not self.attributes and not self.blocks
