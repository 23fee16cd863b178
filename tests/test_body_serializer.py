"""Tests for the body serializer and tree builder."""

import pytest
from hcl_transformer.serializers import BodySerializer, TreeBuilder
from hcl_transformer.syntax import parse_config
from hcl_transformer.types import ConversionError, ErrorType


def serialize(source):
    return BodySerializer().serialize(parse_config(source))


class TestBodySerializer:
    """Tests for BodySerializer class."""

    def test_labeled_block(self, resource_hcl):
        """Test the labeled resource layout."""
        assert serialize(resource_hcl) == {
            "resource": {
                "aws_instance": {
                    "web": [
                        {"ami": "ami-1", "instance_type": "${var.instance_type}"}
                    ]
                }
            }
        }

    def test_unlabeled_blocks_collect_into_list(self):
        """Test that repeated blocks share one list."""
        result = serialize("locals {\n  a = 1\n}\nlocals {\n  b = 2\n}\n")
        assert result == {"locals": [{"a": 1}, {"b": 2}]}

    def test_sibling_labels(self):
        """Test blocks sharing a type but not labels."""
        result = serialize('variable "a" {\n}\nvariable "b" {\n  default = 1\n}\n')
        assert result == {"variable": {"a": [{}], "b": [{"default": 1}]}}

    def test_same_labels_collect_into_list(self):
        """Test blocks with identical labels."""
        source = 'provider "aws" {\n  region = "a"\n}\nprovider "aws" {\n  region = "b"\n}\n'
        assert serialize(source) == {"provider": {"aws": [{"region": "a"}, {"region": "b"}]}}

    def test_nested_blocks(self):
        """Test blocks inside blocks."""
        source = 'resource "t" "n" {\n  ebs {\n    size = 10\n  }\n}\n'
        assert serialize(source) == {"resource": {"t": {"n": [{"ebs": [{"size": 10}]}]}}}

    def test_attributes_before_blocks(self):
        """Test key order of the result."""
        result = serialize('b {\n}\na = 1\n')
        assert list(result) == ["a", "b"]

    def test_uses_body_source(self):
        """Test that the source text is picked up from the body."""
        body = parse_config('x = upper("a")\n')
        assert BodySerializer().serialize(body) == {"x": '${upper("a")}'}

    def test_labeled_and_unlabeled_conflict(self):
        """Test blocks with and without labels under one type."""
        with pytest.raises(ConversionError) as exc_info:
            serialize('a "x" {\n}\na {\n}\n')
        assert exc_info.value.error_type == ErrorType.STRUCTURE

    def test_unlabeled_then_labeled_conflict(self):
        """Test the reverse order of the same conflict."""
        with pytest.raises(ConversionError) as exc_info:
            serialize('a {\n}\na "x" {\n}\n')
        assert exc_info.value.error_type == ErrorType.STRUCTURE

    def test_attribute_and_block_conflict(self):
        """Test an attribute sharing its name with a block."""
        with pytest.raises(ConversionError):
            serialize("locals = 1\nlocals {\n}\n")


class TestTreeBuilder:
    """Tests for TreeBuilder class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.builder = TreeBuilder()

    def test_deep_labels(self):
        """Test a block with three labels."""
        self.builder.append_block("t", ["a", "b", "c"], {"x": 1})
        assert self.builder.root == {"t": {"a": {"b": {"c": [{"x": 1}]}}}}

    def test_label_paths_are_shared(self):
        """Test that label objects are reused by later blocks."""
        self.builder.append_block("t", ["a", "b"], {})
        self.builder.append_block("t", ["a", "c"], {})
        assert self.builder.root == {"t": {"a": {"b": [{}], "c": [{}]}}}

    def test_label_under_block_list(self):
        """Test a label path running through a block list."""
        self.builder.append_block("t", ["a"], {})
        with pytest.raises(ConversionError):
            self.builder.append_block("t", ["a", "b"], {})

    def test_attribute_after_block(self):
        """Test that attributes cannot replace blocks."""
        self.builder.append_block("t", [], {})
        with pytest.raises(ConversionError):
            self.builder.set_attribute("t", 1)
