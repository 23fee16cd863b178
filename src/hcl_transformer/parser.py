"""Input parsers for both conversion directions."""

import json
import logging
from typing import Any, Dict, Optional
from .types import ConversionError, ErrorType
from .error_handler import ErrorHandler
from .models.body import Body
from .syntax import ParseError, parse_config
from .utils.validation import load_json


class JSONParser:
    """
    JSON parser with validation.

    Numbers are decoded exactly (``int`` or ``Decimal``) and the
    non-standard ``NaN``/``Infinity`` constants are refused.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, json_string: str) -> Dict[str, Any]:
        """
        Parse a JSON document whose root is an object.

        Args:
            json_string: JSON string to parse

        Returns:
            The decoded root object

        Raises:
            ConversionError: With SYNTAX or STRUCTURE type if the input is invalid
        """
        validation_result = self.error_handler.validate_input(json_string)
        if not validation_result.is_valid:
            first = validation_result.errors[0]
            error_messages = [error.message for error in validation_result.errors]
            raise ConversionError(
                f"Invalid JSON input: {'; '.join(error_messages)}",
                first.type,
                context={"location": first.location}
            )
        for warning in validation_result.warnings:
            self.logger.warning(warning)

        try:
            data = load_json(json_string)
        except (json.JSONDecodeError, ValueError) as e:
            raise ConversionError(f"JSON parsing failed: {e}", ErrorType.SYNTAX)

        self.logger.info(f"Parsed JSON document with {len(data)} top-level keys")
        return data


class ConfigParser:
    """Parser for native configuration text."""

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the configuration parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, config_string: str, filename: str = "<input>") -> Body:
        """
        Parse configuration text into a body.

        Args:
            config_string: Configuration source text
            filename: Name used in error messages

        Returns:
            The parsed document body, carrying its source text

        Raises:
            ConversionError: With PARSE type on the first syntax error
        """
        validation_result = self.error_handler.validate_config(config_string)
        if not validation_result.is_valid:
            raise ConversionError(
                "; ".join(error.message for error in validation_result.errors),
                ErrorType.PARSE,
                context={"filename": filename}
            )

        try:
            body = parse_config(config_string)
        except ParseError as e:
            raise ConversionError(
                f"{filename}:{e.line},{e.col}: {e.msg}",
                ErrorType.PARSE,
                context={"filename": filename, "line": e.line, "column": e.col}
            )

        self.logger.info(f"Parsed {filename}: {len(body.attributes)} attributes, "
                         f"{len(body.blocks)} blocks")
        return body
