"""Block detection for JSON values headed into native configuration."""

import logging
from typing import Any, Optional
from .models.values import is_list, is_object, single_item, sole_element
from .types import Dialect

# Names that always hold block definitions when their value is a list
LIST_BLOCK_TYPES = frozenset({
    "resource",
    "data",
    "provider",
    "output",
    "locals",
    "module",
    "terraform",
    "attribute",
    "global_secondary_index",
    "local_secondary_index",
    "backup_policy",
    "point_in_time_recovery",
    "server_side_encryption",
    "stream_specification",
    "ttl",
})

# Names whose object values become labeled blocks under BLOCK_PREFERRING
OBJECT_BLOCK_TYPES = frozenset({
    "variable",
    "output",
    "locals",
    "provider",
    "resource",
    "data",
    "module",
    "terraform",
})

# Variable declarations are blocks in module files and nested values in tfvars
DIALECT_BLOCK_TYPE = "variable"


class BlockDetector:
    """
    Classifier deciding whether a JSON value is a set of block definitions.

    The decision is a fixed precedence of name and shape checks; it never
    looks further than the first element of a list.
    """

    def __init__(self, dialect: Dialect = Dialect.BLOCK_PREFERRING,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the block detector.

        Args:
            dialect: Policy for ambiguous names
            logger: Optional logger instance
        """
        self.dialect = dialect
        self.logger = logger or logging.getLogger(__name__)

    def is_block_shaped(self, key: str, value: Any) -> bool:
        """
        Classify the value stored under key.

        Args:
            key: Attribute name in the enclosing object
            value: Generic value stored under key

        Returns:
            True if the value should be synthesized as blocks
        """
        if is_object(value):
            return self.is_block_object(key, value)
        if not is_list(value) or not value:
            return False

        if key == DIALECT_BLOCK_TYPE:
            return self.dialect == Dialect.BLOCK_PREFERRING
        if key in LIST_BLOCK_TYPES:
            return True

        return self.has_nested_block_signature(value[0])

    def is_block_object(self, key: str, value: Any) -> bool:
        """Objects are blocks only for known names under BLOCK_PREFERRING."""
        if not is_object(value):
            return False
        return self.dialect == Dialect.BLOCK_PREFERRING and key in OBJECT_BLOCK_TYPES

    @staticmethod
    def has_nested_block_signature(element: Any) -> bool:
        """
        Check for the ``{type: [{label: ...}]}`` shape.

        A single-key object whose value is a one-element list holding another
        single-key object marks a declared block set; a list of plain records
        does not have it.
        """
        item = single_item(element)
        if item is None:
            return False
        found, inner = sole_element(item[1])
        return found and single_item(inner) is not None
