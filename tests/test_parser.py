"""Tests for input parsers."""

import pytest
from decimal import Decimal
from hcl_transformer.parser import ConfigParser, JSONParser
from hcl_transformer.types import ConversionError, ErrorType


class TestJSONParser:
    """Tests for JSONParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = JSONParser()

    def test_parse_object(self, variable_json):
        """Test parsing a valid document."""
        assert self.parser.parse(variable_json) == {"variable": {"region": [{"type": "string"}]}}

    def test_exact_numbers(self):
        """Test that fractional numbers stay exact."""
        data = self.parser.parse('{"a": 0.1, "b": 10, "c": 1.50}')
        assert data["a"] == Decimal("0.1")
        assert data["b"] == 10 and isinstance(data["b"], int)
        assert str(data["c"]) == "1.50"

    def test_key_order(self):
        """Test that member order is kept."""
        assert list(self.parser.parse('{"z": 1, "a": 2}')) == ["z", "a"]

    def test_invalid_syntax(self):
        """Test malformed JSON."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse('{"a": }')
        assert exc_info.value.error_type == ErrorType.SYNTAX
        assert "line 1" in exc_info.value.context["location"]

    def test_non_finite_constant(self):
        """Test that NaN is refused."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse('{"a": NaN}')
        assert exc_info.value.error_type == ErrorType.SYNTAX

    def test_empty_input(self):
        """Test empty text."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse("   ")
        assert exc_info.value.error_type == ErrorType.SYNTAX

    def test_non_object_root(self):
        """Test a top-level array."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse("[]")
        assert exc_info.value.error_type == ErrorType.STRUCTURE


class TestConfigParser:
    """Tests for ConfigParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = ConfigParser()

    def test_parse(self, resource_hcl):
        """Test parsing configuration text."""
        body = self.parser.parse(resource_hcl)
        assert body.blocks[0].labels == ["aws_instance", "web"]
        assert body.source == resource_hcl

    def test_empty_text(self):
        """Test that empty text is an empty document."""
        assert self.parser.parse("").is_empty()

    def test_error_position(self):
        """Test that parse errors carry file and position."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse("a = 1\nb = \n", filename="main.tf")
        error = exc_info.value
        assert error.error_type == ErrorType.PARSE
        assert str(error).startswith("main.tf:2,")
        assert error.context["line"] == 2
        assert error.context["filename"] == "main.tf"

    def test_nul_character(self):
        """Test that NUL characters are refused before parsing."""
        with pytest.raises(ConversionError) as exc_info:
            self.parser.parse("a = 1\x00")
        assert exc_info.value.error_type == ErrorType.PARSE
