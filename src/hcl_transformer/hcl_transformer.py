"""Main HCL Transformer implementation."""

import logging
from typing import Any, Dict, Optional
from .types import (
    HCLTransformerInterface,
    ConversionOptions,
    ConversionError,
    Dialect,
    HCLResult,
    JSONResult,
)
from .parser import JSONParser, ConfigParser
from .block_detector import BlockDetector
from .processors import AttributeProcessor, BlockProcessor
from .serializers import BodySerializer, ExpressionSerializer
from .models.body import Body
from .io import HCLWriter, JSONWriter
from .error_handler import ErrorHandler
from .profiler import PerformanceProfiler


class HCLTransformer(HCLTransformerInterface):
    """
    Main implementation of the HCL Transformer interface.

    Converts between JSON documents and native configuration text. Each call
    either produces one complete output document or fails with one error.
    """

    def __init__(self, options: Optional[ConversionOptions] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the HCL Transformer.

        Args:
            options: Default conversion options
            logger: Optional logger instance
        """
        self.options = options or ConversionOptions()
        self.logger = logger or logging.getLogger(__name__)

        self.error_handler = ErrorHandler(self.logger)
        self.json_parser = JSONParser(self.error_handler, self.logger)
        self.config_parser = ConfigParser(self.error_handler, self.logger)
        self.attribute_processor = AttributeProcessor(self.logger)
        self.hcl_writer = HCLWriter(logger=self.logger)
        self.profiler = PerformanceProfiler(self.logger)

    def to_hcl(self, json_string: str, options: Optional[ConversionOptions] = None) -> HCLResult:
        """
        Convert a JSON document into native configuration text.

        Args:
            json_string: JSON text whose root is an object
            options: Conversion options, defaults to the instance options

        Returns:
            HCLResult with the rendered text or a single error
        """
        options = options or self.options
        self.error_handler.reset()
        input_size = len(json_string.encode("utf-8")) if isinstance(json_string, str) else 0

        with self.profiler.profile_operation("to_hcl", input_size) as profile:
            try:
                document = self.json_parser.parse(json_string)
                profile.sample_performance()
                body = self.build_body(document, options.dialect)
                hcl_string = self.hcl_writer.render(body)

                profile.output_size = len(hcl_string.encode("utf-8"))
                profile.fallbacks = len(self.error_handler.fallbacks)
                self.logger.info(f"Converted JSON to {len(body.attributes)} attributes and "
                                 f"{len(body.blocks)} blocks ({options.dialect.value})")
                return HCLResult(success=True, hcl_string=hcl_string)

            except ConversionError as e:
                self.error_handler.handle_conversion_error(e)
                profile.success = False
                return HCLResult(success=False, hcl_string="", errors=[str(e)])

            except Exception as e:
                self.logger.error(f"Unexpected error in to_hcl: {e}")
                profile.success = False
                return HCLResult(success=False, hcl_string="",
                                 errors=[f"Unexpected error: {str(e)}"])

    def to_json(self, hcl_string: str, options: Optional[ConversionOptions] = None,
                filename: str = "<input>") -> JSONResult:
        """
        Convert native configuration text into a JSON document.

        Args:
            hcl_string: Configuration source text
            options: Conversion options, defaults to the instance options
            filename: Name used in parse error messages

        Returns:
            JSONResult with the JSON text or a single error
        """
        options = options or self.options
        self.error_handler.reset()
        input_size = len(hcl_string.encode("utf-8")) if isinstance(hcl_string, str) else 0

        with self.profiler.profile_operation("to_json", input_size) as profile:
            try:
                body = self.config_parser.parse(hcl_string, filename)
                profile.sample_performance()
                document = self.serialize_body(body)
                json_string = JSONWriter(options.indent, self.logger).dumps(document)

                profile.output_size = len(json_string.encode("utf-8"))
                profile.fallbacks = len(self.error_handler.fallbacks)
                self.logger.info(f"Converted configuration to JSON with {len(document)} top-level keys")
                return JSONResult(success=True, json_string=json_string)

            except ConversionError as e:
                self.error_handler.handle_conversion_error(e)
                profile.success = False
                return JSONResult(success=False, json_string="", errors=[str(e)])

            except Exception as e:
                self.logger.error(f"Unexpected error in to_json: {e}")
                profile.success = False
                return JSONResult(success=False, json_string="",
                                  errors=[f"Unexpected error: {str(e)}"])

    def build_body(self, document: Dict[str, Any],
                   dialect: Dialect = Dialect.BLOCK_PREFERRING) -> Body:
        """
        Synthesize a body from a decoded JSON document.

        Never raises for malformed block shapes; those keys fall back to
        plain attributes.
        """
        processor = BlockProcessor(
            detector=BlockDetector(dialect, self.logger),
            attribute_processor=self.attribute_processor,
            error_handler=self.error_handler,
            logger=self.logger
        )
        return processor.process_document(document)

    def serialize_body(self, body: Body) -> Dict[str, Any]:
        """
        Serialize a parsed body into a generic value.

        Raises:
            ConversionError: With STRUCTURE type if blocks and attributes collide
        """
        expression_serializer = ExpressionSerializer(body.source, self.logger, self.error_handler)
        return BodySerializer(expression_serializer=expression_serializer,
                              logger=self.logger).serialize(body)
