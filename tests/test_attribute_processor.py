"""Tests for attribute emission."""

from decimal import Decimal
from hcl_transformer.io import HCLWriter
from hcl_transformer.models import Body, Literal, ObjectCons, Opaque, Traversal, TupleCons
from hcl_transformer.processors import AttributeProcessor
from hcl_transformer.processors.attribute_processor import unwrap_reference


class TestAttributeProcessor:
    """Tests for AttributeProcessor class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.processor = AttributeProcessor()
        self.writer = HCLWriter()

    def render(self, value, name="x"):
        return self.writer.render_expression(self.processor.to_expression(value, name))

    def test_scalars(self):
        """Test scalar values."""
        assert self.processor.to_expression(True) == Literal(True)
        assert self.processor.to_expression(None) == Literal(None)
        assert self.processor.to_expression(Decimal("1.5")) == Literal(Decimal("1.5"))
        assert self.processor.to_expression("plain") == Literal("plain")

    def test_type_keywords(self):
        """Test that type names under a type key are bare."""
        expr = self.processor.to_expression("string", "type")
        assert isinstance(expr, Traversal)
        assert self.render("string", "type") == "string"
        assert self.render("string", "name") == '"string"'
        assert self.render("custom", "type") == '"custom"'

    def test_reference_unwrapped(self):
        """Test simple references."""
        expr = self.processor.to_expression("${var.region}", "region")
        assert expr == Opaque(kind="reference", text="var.region")
        assert self.render("${var.region}") == "var.region"

    def test_template_kept_verbatim(self):
        """Test that other interpolating strings are not escaped."""
        assert self.render("${a}-${b}") == '"${a}-${b}"'
        assert self.render('${lookup(var.m, "k")}') == '"${lookup(var.m, "k")}"'

    def test_literal_dollar_escaped(self):
        """Test that %{ alone is escaped."""
        assert self.render("100%{x}") == '"100%%{x}"'

    def test_list(self):
        """Test lists, with elements carrying no key."""
        expr = self.processor.to_expression(["string", "${var.a}"], "type")
        assert isinstance(expr, TupleCons)
        assert self.writer.render_expression(expr) == '["string", var.a]'

    def test_object(self):
        """Test objects, with members carrying their key."""
        expr = self.processor.to_expression({"type": "number", "Name": "${var.n}"})
        assert isinstance(expr, ObjectCons)
        assert self.writer.render_expression(expr) == "{\n  type = number\n  Name = var.n\n}"

    def test_process_sets_attribute(self):
        """Test writing into a body."""
        body = Body()
        self.processor.process("count", 3, body)
        assert body.attributes["count"].expr == Literal(3)


class TestUnwrapReference:
    """Tests for unwrap_reference()."""

    def test_simple(self):
        """Test references that are unwrapped."""
        assert unwrap_reference("${var.name}") == "var.name"
        assert unwrap_reference("${aws_instance.web.0.id}") == "aws_instance.web.0.id"

    def test_not_simple(self):
        """Test strings left alone."""
        assert unwrap_reference("${f(x)}") is None
        assert unwrap_reference("x${var.a}") is None
        assert unwrap_reference("${a} ${b}") is None
        assert unwrap_reference("var.name") is None
