"""Block synthesis for JSON values headed into native configuration."""

import logging
from typing import Any, Dict, List, Optional
from ..block_detector import BlockDetector
from ..error_handler import ErrorHandler
from ..io.hcl_writer import is_identifier
from ..models.body import Block, Body
from ..models.values import is_list, is_object
from ..types import BodyProcessorInterface, ConversionError, ErrorType
from .attribute_processor import AttributeProcessor
from .label_extractor import extract_labels_and_content


class BlockProcessor(BodyProcessorInterface):
    """
    Processor writing JSON object members into a body as blocks or attributes.

    Block-shaped values come in two forms: a list of instances
    (``"resource": [{"aws_instance": [{"web": [{...}]}]}]``) and, for known
    block types, nested objects keyed by label
    (``"resource": {"aws_instance": {"web": [{...}]}}``). When a value that
    looked like blocks cannot be synthesized, the whole value is written as a
    plain attribute instead and the failure is recorded with the error handler.
    """

    def __init__(self, detector: Optional[BlockDetector] = None,
                 attribute_processor: Optional[AttributeProcessor] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the block processor.

        Args:
            detector: Optional BlockDetector instance
            attribute_processor: Optional AttributeProcessor instance
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.detector = detector or BlockDetector(logger=self.logger)
        self.attribute_processor = attribute_processor or AttributeProcessor(self.logger)
        self.error_handler = error_handler or ErrorHandler(self.logger)

    def process(self, name: str, value: Any, body: Body) -> None:
        """
        Emit one member of a JSON object into body.

        Args:
            name: Member key
            value: Member value
            body: Target body
        """
        if is_list(value) and self.detector.is_block_shaped(name, value):
            self._synthesize_or_fallback(name, value, body, self.synthesize_list)
        elif is_object(value) and self.detector.is_block_object(name, value):
            self._synthesize_or_fallback(name, value, body, self.synthesize_object)
        else:
            self.attribute_processor.process(name, value, body)

    def process_document(self, document: Dict[str, Any], body: Optional[Body] = None) -> Body:
        """Emit every member of a JSON document into a body."""
        body = body if body is not None else Body()
        for name, value in document.items():
            self.process(name, value, body)
        return body

    def _synthesize_or_fallback(self, name: str, value: Any, body: Body, synthesize) -> None:
        try:
            blocks = synthesize(name, value)
        except ConversionError as e:
            self.error_handler.record_fallback(name, str(e), e.error_type)
            self.attribute_processor.process(name, value, body)
            return
        body.blocks.extend(blocks)
        self.logger.debug(f"Synthesized {len(blocks)} {name} block(s)")

    def _emit_field(self, name: str, value: Any, body: Body) -> None:
        """Emit a field of block content; only lists are checked for nested blocks."""
        if is_list(value) and self.detector.is_block_shaped(name, value):
            self._synthesize_or_fallback(name, value, body, self.synthesize_list)
        else:
            self.attribute_processor.process(name, value, body)

    def synthesize_list(self, block_type: str, value: List[Any]) -> List[Block]:
        """
        Build one block per list element.

        Args:
            block_type: Block type name
            value: List of block instances

        Returns:
            The synthesized blocks, in order

        Raises:
            ConversionError: With MISMATCH type if any instance has no block shape
        """
        self._check_block_type(block_type)
        blocks = []
        for instance in value:
            labels, content = extract_labels_and_content(instance)
            block = Block(block_type, labels)
            for field_name, field_value in content.items():
                self._emit_field(field_name, field_value, block.body)
            blocks.append(block)
        return blocks

    def synthesize_object(self, block_type: str, value: Dict[str, Any]) -> List[Block]:
        """
        Build blocks from an object keyed by label.

        Raises:
            ConversionError: With MISMATCH type if a label path has no block shape
        """
        self._check_block_type(block_type)
        blocks: List[Block] = []
        for label, inner in value.items():
            self._object_blocks(block_type, [label], inner, blocks)
        return blocks

    def _object_blocks(self, block_type: str, labels: List[str], value: Any,
                       blocks: List[Block]) -> None:
        path = ".".join([block_type] + labels)

        if is_list(value):
            if not value:
                raise ConversionError(
                    f"expected at least one block body for {path}",
                    ErrorType.MISMATCH,
                    context={"block": block_type, "labels": labels}
                )
            for element in value:
                if not is_object(element):
                    raise ConversionError(
                        f"expected object in array for block {path}",
                        ErrorType.MISMATCH,
                        context={"block": block_type, "labels": labels}
                    )
                block = Block(block_type, list(labels))
                for field_name, field_value in element.items():
                    self._emit_field(field_name, field_value, block.body)
                blocks.append(block)
            return

        if is_object(value):
            if value and all(is_list(inner) for inner in value.values()):
                for nested_label, inner in value.items():
                    self._object_blocks(block_type, labels + [nested_label], inner, blocks)
                return
            block = Block(block_type, list(labels))
            for field_name, field_value in value.items():
                self.attribute_processor.process(field_name, field_value, block.body)
            blocks.append(block)
            return

        raise ConversionError(
            f"unexpected value type for block {path}: {type(value).__name__}",
            ErrorType.MISMATCH,
            context={"block": block_type, "labels": labels}
        )

    @staticmethod
    def _check_block_type(block_type: str) -> None:
        if not is_identifier(block_type):
            raise ConversionError(
                f"{block_type!r} is not a valid block type name",
                ErrorType.MISMATCH,
                context={"block": block_type}
            )
