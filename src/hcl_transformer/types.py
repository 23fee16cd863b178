"""Core type definitions for the HCL Transformer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class Dialect(Enum):
    """Classification policy for ambiguous array/object attributes."""
    BLOCK_PREFERRING = "block-preferring"
    NEST_PREFERRING = "nest-preferring"

    @classmethod
    def from_output_path(cls, output_path: Optional[Union[str, Path]]) -> "Dialect":
        """Pick the dialect implied by an output file name."""
        if output_path and Path(output_path).suffix == ".tfvars":
            return cls.NEST_PREFERRING
        return cls.BLOCK_PREFERRING

    @classmethod
    def from_flags(cls, treat_arrays_as_blocks: bool = False,
                   keep_arrays_nested: bool = False,
                   output_path: Optional[Union[str, Path]] = None) -> "Dialect":
        """
        Resolve the dialect from command-line style switches.

        Args:
            treat_arrays_as_blocks: Force block-preferring classification
            keep_arrays_nested: Force nest-preferring classification
            output_path: Output file used as a fallback hint

        Returns:
            The resolved Dialect

        Raises:
            ConversionError: If both switches are set
        """
        if treat_arrays_as_blocks and keep_arrays_nested:
            raise ConversionError(
                "Cannot use both --treat-arrays-as-blocks and --keep-arrays-nested flags together",
                ErrorType.OPTIONS
            )
        if treat_arrays_as_blocks:
            return cls.BLOCK_PREFERRING
        if keep_arrays_nested:
            return cls.NEST_PREFERRING
        return cls.from_output_path(output_path)


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    PARSE = "parse"
    STRUCTURE = "structure"
    MISMATCH = "mismatch"
    EXPRESSION = "expression"
    OPTIONS = "options"


@dataclass
class ConversionOptions:
    """Options shared by both conversion directions."""
    dialect: Dialect = Dialect.BLOCK_PREFERRING
    indent: int = 2


@dataclass
class HCLResult:
    """Result of a JSON to HCL conversion."""
    success: bool
    hcl_string: str
    errors: Optional[List[str]] = None


@dataclass
class JSONResult:
    """Result of an HCL to JSON conversion."""
    success: bool
    json_string: str
    errors: Optional[List[str]] = None


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


@dataclass
class FallbackRecord:
    """A locally recovered classification or extraction failure."""
    key: str
    reason: str
    error_type: ErrorType = ErrorType.MISMATCH


class ConversionError(Exception):
    """Custom exception for conversion errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


# Abstract base classes for interfaces

class HCLTransformerInterface(ABC):
    """Abstract interface for the HCL Transformer."""

    @abstractmethod
    def to_hcl(self, json_string: str, options: Optional[ConversionOptions] = None) -> HCLResult:
        """Convert a JSON document into native configuration text."""
        pass

    @abstractmethod
    def to_json(self, hcl_string: str, options: Optional[ConversionOptions] = None) -> JSONResult:
        """Convert native configuration text into a JSON document."""
        pass


class BodyProcessorInterface(ABC):
    """Abstract interface for processors that write into a target body."""

    @abstractmethod
    def process(self, name: str, value: Any, body: "Body") -> None:
        """Emit the value stored under name into body."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_input(self, input_data: str) -> ValidationResult:
        """Validate input data."""
        pass

    @abstractmethod
    def handle_conversion_error(self, error: ConversionError) -> ErrorResponse:
        """Handle conversion errors."""
        pass

    @abstractmethod
    def record_fallback(self, key: str, reason: str,
                        error_type: ErrorType = ErrorType.MISMATCH) -> FallbackRecord:
        """Record a locally recovered failure."""
        pass
