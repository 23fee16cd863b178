"""Tests for validation utilities."""

import pytest
from decimal import Decimal
from hcl_transformer.types import ErrorType
from hcl_transformer.utils import ValidationUtils, load_json


class TestValidationUtils:
    """Tests for ValidationUtils class."""

    def test_valid_document(self):
        """Test a valid object document."""
        result = ValidationUtils.validate_json_string('{"a": [1, 2]}')
        assert result.is_valid
        assert result.warnings == []

    def test_invalid_syntax(self):
        """Test error location of malformed JSON."""
        result = ValidationUtils.validate_json_string('{\n  "a": 1\n  "b": 2\n}')
        assert not result.is_valid
        assert result.errors[0].type == ErrorType.SYNTAX
        assert result.errors[0].location.startswith("line 3")

    def test_empty(self):
        """Test empty input."""
        result = ValidationUtils.validate_json_string("")
        assert result.errors[0].message == "JSON string is empty"

    def test_non_object_roots(self):
        """Test scalar and array roots."""
        for text in ("[]", "1", '"a"', "null"):
            result = ValidationUtils.validate_json_string(text)
            assert result.errors[0].type == ErrorType.STRUCTURE

    def test_deep_nesting_warning(self):
        """Test the depth warning."""
        text = '{"a": ' + "[" * 25 + "]" * 25 + "}"
        result = ValidationUtils.validate_json_string(text)
        assert result.is_valid
        assert "Deep nesting" in result.warnings[0]

    def test_infinity_rejected(self):
        """Test that Infinity is a syntax error."""
        result = ValidationUtils.validate_json_string('{"a": -Infinity}')
        assert result.errors[0].type == ErrorType.SYNTAX

    def test_config_string(self):
        """Test configuration text checks."""
        assert ValidationUtils.validate_config_string("a = 1\n").is_valid
        empty = ValidationUtils.validate_config_string("  \n")
        assert empty.is_valid
        assert empty.warnings == ["Configuration text is empty"]
        assert not ValidationUtils.validate_config_string("\x00").is_valid

    def test_calculate_max_depth(self):
        """Test depth calculation."""
        assert ValidationUtils._calculate_max_depth({"a": {"b": [1]}}) == 3
        assert ValidationUtils._calculate_max_depth(1) == 0


class TestLoadJSON:
    """Tests for load_json()."""

    def test_exact_numbers(self):
        """Test that floats decode to Decimal."""
        assert load_json("[0.1, 2]") == [Decimal("0.1"), 2]

    def test_nan_rejected(self):
        """Test that NaN raises."""
        with pytest.raises(ValueError):
            load_json("NaN")
