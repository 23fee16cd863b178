"""Validation utilities for conversion inputs."""

import json
from decimal import Decimal
from typing import Any, List, Tuple

from ..types import ValidationResult, ValidationError, ErrorType

MAX_RECOMMENDED_DEPTH = 20


def reject_constant(name: str) -> Any:
    """``parse_constant`` hook refusing NaN and Infinity."""
    raise ValueError(f"Non-finite number {name} is not allowed")


def load_json(json_string: str) -> Any:
    """Decode JSON text with exact numbers and no non-finite constants."""
    return json.loads(json_string, parse_float=Decimal, parse_constant=reject_constant)


class ValidationUtils:
    """Utility class for validating conversion inputs."""

    @staticmethod
    def validate_json_string(json_string: str) -> ValidationResult:
        """
        Validate JSON string syntax and structure.

        Args:
            json_string: JSON string to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if not json_string.strip():
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message="JSON string is empty",
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        try:
            data = load_json(json_string)
        except json.JSONDecodeError as e:
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message=f"Invalid JSON syntax: {e.msg}",
                location=f"line {e.lineno}, column {e.colno}"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)
        except ValueError as e:
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message=str(e),
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        structure_errors, structure_warnings = ValidationUtils._validate_json_structure(data)
        errors.extend(structure_errors)
        warnings.extend(structure_warnings)

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def _validate_json_structure(data: Any) -> Tuple[List[ValidationError], List[str]]:
        """Validate that the document root can become a configuration body."""
        errors = []
        warnings = []

        if not isinstance(data, dict):
            errors.append(ValidationError(
                type=ErrorType.STRUCTURE,
                message=f"Root element must be an object, got {type(data).__name__}",
                location="root"
            ))
            return errors, warnings

        max_depth = ValidationUtils._calculate_max_depth(data)
        if max_depth > MAX_RECOMMENDED_DEPTH:
            warnings.append(f"Deep nesting detected (depth: {max_depth}). This may impact performance.")

        return errors, warnings

    @staticmethod
    def validate_config_string(config_string: str) -> ValidationResult:
        """
        Validate configuration text before parsing.

        Empty text is a valid, empty document.
        """
        errors = []
        warnings = []

        if "\x00" in config_string:
            errors.append(ValidationError(
                type=ErrorType.PARSE,
                message="Configuration text contains NUL characters",
                location="input"
            ))
        elif not config_string.strip():
            warnings.append("Configuration text is empty")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def _calculate_max_depth(data: Any, current_depth: int = 0) -> int:
        """Calculate maximum nesting depth."""
        if not isinstance(data, (dict, list)):
            return current_depth

        children = data.values() if isinstance(data, dict) else data
        max_child_depth = current_depth
        for child in children:
            child_depth = ValidationUtils._calculate_max_depth(child, current_depth + 1)
            max_child_depth = max(max_child_depth, child_depth)

        return max_child_depth
