"""Processors that turn JSON values into configuration bodies."""

from .attribute_processor import AttributeProcessor
from .block_processor import BlockProcessor
from .label_extractor import extract_labels_and_content

__all__ = ["AttributeProcessor", "BlockProcessor", "extract_labels_and_content"]
