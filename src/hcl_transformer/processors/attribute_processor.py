"""Attribute emission for JSON values headed into native configuration."""

import logging
import re
from typing import Any, Optional
from ..models.body import Body
from ..models.expressions import (
    Expression,
    Literal,
    ObjectCons,
    ObjectItem,
    Opaque,
    RootSegment,
    Traversal,
    TupleCons,
)
from ..types import BodyProcessorInterface

# Type constraint keywords written without quotes
UNQUOTED_TYPES = frozenset({
    "string", "number", "bool", "list", "set", "map", "object", "tuple", "any",
})

_SIMPLE_REFERENCE_RE = re.compile(r"^\$\{([A-Za-z0-9._-]+)\}$")


def unwrap_reference(text: str) -> Optional[str]:
    """Return ``var.name`` for ``"${var.name}"``, None for anything else."""
    match = _SIMPLE_REFERENCE_RE.match(text)
    return match.group(1) if match else None


class AttributeProcessor(BodyProcessorInterface):
    """
    Emitter turning generic values into attribute expressions.

    Strings get special treatment at every leaf, including inside lists and
    objects:

    * ``type = "string"`` style keywords become bare identifiers.
    * ``"${var.name}"`` becomes the bare reference ``var.name``.
    * Any other string containing ``${`` is written between quotes exactly as
      given, without escaping.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the attribute processor.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def process(self, name: str, value: Any, body: Body) -> None:
        """
        Set ``name = <value>`` on body.

        Args:
            name: Attribute name
            value: Generic value to emit
            body: Target body
        """
        body.set_attribute(name, self.to_expression(value, name))

    def to_expression(self, value: Any, name: Optional[str] = None) -> Expression:
        """
        Build the expression for a value.

        Args:
            value: Generic value
            name: Key the value is stored under, None for list elements

        Returns:
            Expression ready for rendering
        """
        if isinstance(value, str):
            return self._string_expression(value, name)
        if isinstance(value, list):
            return TupleCons([self.to_expression(item) for item in value])
        if isinstance(value, dict):
            return ObjectCons([
                ObjectItem(Literal(key), self.to_expression(item, key))
                for key, item in value.items()
            ])
        return Literal(value)

    def _string_expression(self, value: str, name: Optional[str]) -> Expression:
        if name == "type" and value in UNQUOTED_TYPES:
            return Traversal([RootSegment(value)])

        reference = unwrap_reference(value)
        if reference is not None:
            self.logger.debug(f"Unwrapping reference {reference} for {name!r}")
            return Opaque(kind="reference", text=reference)

        if "${" in value:
            return Opaque(kind="template", text='"' + value + '"')

        return Literal(value)
