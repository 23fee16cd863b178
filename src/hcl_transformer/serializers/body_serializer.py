"""Body serializer: attribute/block bodies to JSON objects."""

import logging
from typing import Any, Dict, Optional

from ..models.body import Body
from .expression_serializer import ExpressionSerializer
from .tree_builder import TreeBuilder


class BodySerializer:
    """
    Serializer for bodies.

    Attributes become object members through the expression serializer;
    blocks nest under their type and labels, and sibling blocks that share a
    type and labels are collected into one list.
    """

    def __init__(self, source: Optional[str] = None,
                 expression_serializer: Optional[ExpressionSerializer] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the body serializer.

        Args:
            source: Text the body was parsed from
            expression_serializer: Optional ExpressionSerializer instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.expression_serializer = expression_serializer or ExpressionSerializer(
            source, self.logger
        )

    def serialize(self, body: Body) -> Dict[str, Any]:
        """
        Convert a body into a JSON object.

        Args:
            body: Body to convert

        Returns:
            Ordered dictionary of attributes followed by blocks

        Raises:
            ConversionError: If a block collides with non-block data
        """
        if body.source is not None and self.expression_serializer.source is None:
            self.expression_serializer.source = body.source

        builder = TreeBuilder()
        for name, attribute in body.attributes.items():
            builder.set_attribute(name, self.expression_serializer.serialize(attribute.expr))

        for block in body.blocks:
            self.logger.debug(f"Serializing block {block.type} {block.labels}")
            builder.append_block(block.type, block.labels, self.serialize(block.body))

        return builder.root
