"""Error handling implementation for the HCL Transformer."""

import logging
from typing import List, Optional
from .types import (
    ErrorHandlerInterface,
    ValidationResult,
    ValidationError,
    ErrorResponse,
    FallbackRecord,
    ConversionError,
    ErrorType
)
from .utils.validation import ValidationUtils


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for HCL Transformer conversions.

    Validates inputs, classifies terminal conversion errors and keeps a record
    of the failures that were recovered locally during a conversion.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)
        self.fallbacks: List[FallbackRecord] = []

    def validate_input(self, input_data: str) -> ValidationResult:
        """
        Validate input JSON string.

        Args:
            input_data: JSON string to validate

        Returns:
            ValidationResult with validation details
        """
        if not isinstance(input_data, str):
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.SYNTAX,
                    message=f"Input must be a string, got {type(input_data).__name__}",
                    location="input"
                )],
                warnings=[]
            )
        return ValidationUtils.validate_json_string(input_data)

    def validate_config(self, input_data: str) -> ValidationResult:
        """Validate configuration text before parsing."""
        if not isinstance(input_data, str):
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.PARSE,
                    message=f"Input must be a string, got {type(input_data).__name__}",
                    location="input"
                )],
                warnings=[]
            )
        return ValidationUtils.validate_config_string(input_data)

    def handle_conversion_error(self, error: ConversionError) -> ErrorResponse:
        """
        Map a terminal conversion error to a suggested action.

        Args:
            error: ConversionError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Conversion error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.SYNTAX:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Fix the JSON syntax error and retry.",
            )
        elif error.error_type == ErrorType.PARSE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Fix the configuration syntax error at the reported position.",
            )
        elif error.error_type == ErrorType.STRUCTURE:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Rename the attribute or block that shares a name with the other.",
                partial_results=error.context
            )
        elif error.error_type == ErrorType.OPTIONS:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Choose at most one of --treat-arrays-as-blocks and --keep-arrays-nested.",
            )
        else:
            return ErrorResponse(
                can_recover=True,
                suggested_action="The value was kept in an equivalent attribute form.",
                partial_results=error.context
            )

    def record_fallback(self, key: str, reason: str,
                        error_type: ErrorType = ErrorType.MISMATCH) -> FallbackRecord:
        """
        Record a failure that was recovered without aborting the conversion.

        Args:
            key: Name of the attribute or block the failure concerns
            reason: Human readable description
            error_type: MISMATCH or EXPRESSION

        Returns:
            The stored FallbackRecord
        """
        record = FallbackRecord(key=key, reason=reason, error_type=error_type)
        self.fallbacks.append(record)
        self.logger.debug(f"Recovered {error_type.value} for {key!r}: {reason}")
        return record

    def reset(self) -> None:
        """Forget recorded fallbacks before a new conversion."""
        self.fallbacks = []
