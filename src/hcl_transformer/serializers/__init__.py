"""Serializers from configuration trees to generic values."""

from .body_serializer import BodySerializer
from .expression_serializer import ExpressionSerializer, escape_literal
from .tree_builder import TreeBuilder

__all__ = ["BodySerializer", "ExpressionSerializer", "TreeBuilder", "escape_literal"]
