"""Tests for the HCL writer."""

import pytest
from decimal import Decimal
from hcl_transformer.io import HCLWriter
from hcl_transformer.io.hcl_writer import escape_string, is_identifier
from hcl_transformer.models import (
    Body,
    Literal,
    ObjectCons,
    ObjectItem,
    Opaque,
    RootSegment,
    Traversal,
    TupleCons,
    UnaryOp,
)
from hcl_transformer.syntax import parse_config, parse_expression
from hcl_transformer.types import ConversionError


def obj(**members):
    return ObjectCons([ObjectItem(Literal(key), value) for key, value in members.items()])


class TestHCLWriter:
    """Tests for HCLWriter class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.writer = HCLWriter()

    def test_empty_body(self):
        """Test that an empty body renders as nothing."""
        assert self.writer.render(Body()) == ""

    def test_aligned_attributes(self):
        """Test = alignment across consecutive attributes."""
        body = Body()
        body.set_attribute("a", Literal(1))
        body.set_attribute("long_name", Literal("x"))
        assert self.writer.render(body) == (
            "a" + " " * 8 + " = 1\n"
            'long_name = "x"\n'
        )

    def test_labeled_block(self):
        """Test block headers and indentation."""
        body = Body()
        block = body.append_block("resource", ["aws_instance", "web"])
        block.body.set_attribute("ami", Literal("ami-1"))
        assert self.writer.render(body) == (
            'resource "aws_instance" "web" {\n'
            '  ami = "ami-1"\n'
            '}\n'
        )

    def test_blocks_after_attributes(self):
        """Test blank lines between attributes and blocks."""
        body = Body()
        body.append_block("b")
        body.set_attribute("x", Literal(1))
        body.append_block("c")
        assert self.writer.render(body) == "x = 1\n\nb {\n}\n\nc {\n}\n"

    def test_nested_block_indentation(self):
        """Test two levels of nesting."""
        body = Body()
        outer = body.append_block("a")
        inner = outer.body.append_block("b")
        inner.body.set_attribute("c", Literal(True))
        assert self.writer.render(body) == "a {\n  b {\n    c = true\n  }\n}\n"

    def test_string_escaping(self):
        """Test quote, newline and template marker escapes."""
        rendered = self.writer.render_expression(Literal('say "hi"\n${x} %{y}'))
        assert rendered == r'"say \"hi\"\n$${x} %%{y}"'

    def test_non_identifier_attribute_name(self):
        """Test that attribute names that are not identifiers are quoted."""
        body = Body()
        body.set_attribute("my key", Literal(1))
        body.set_attribute("id", Literal(2))
        assert self.writer.render(body) == '"my key" = 1\nid' + " " * 6 + ' = 2\n'

    def test_label_escaping(self):
        """Test that labels are quoted and escaped."""
        body = Body()
        body.append_block("a", ['x"y'])
        assert self.writer.render(body) == 'a "x\\"y" {\n}\n'

    def test_opaque_text_is_verbatim(self):
        """Test that raw quoted text is not escaped."""
        assert self.writer.render_expression(Opaque(text='"${a}-${b}"')) == '"${a}-${b}"'

    def test_opaque_without_text(self):
        """Test that an opaque node needs text or source."""
        with pytest.raises(ValueError):
            self.writer.render_expression(Opaque(kind="call"))

    def test_scalars(self):
        """Test null, booleans and exact numbers."""
        assert self.writer.render_expression(Literal(None)) == "null"
        assert self.writer.render_expression(Literal(False)) == "false"
        assert self.writer.render_expression(Literal(Decimal("1.50"))) == "1.50"
        assert self.writer.render_expression(Literal(Decimal("1E+2"))) == "100"
        assert self.writer.render_expression(Literal(12345678901234567890)) == "12345678901234567890"

    def test_traversal(self):
        """Test references with index steps."""
        expr = Traversal.from_reference("aws_instance.web.0.id")
        assert self.writer.render_expression(expr) == "aws_instance.web[0].id"

    def test_bare_identifier(self):
        """Test a root-only traversal."""
        assert self.writer.render_expression(Traversal([RootSegment("string")])) == "string"

    def test_tuple_inline(self):
        """Test tuple formatting."""
        expr = TupleCons([Literal(1), Literal("a")])
        assert self.writer.render_expression(expr) == '[1, "a"]'

    def test_object_multiline(self):
        """Test object formatting with aligned keys."""
        expr = obj(name=Literal("a"), cidr_block=Literal("10.0.0.0/24"))
        assert self.writer.render_expression(expr) == (
            "{\n"
            '  name' + " " * 6 + ' = "a"\n'
            '  cidr_block = "10.0.0.0/24"\n'
            "}"
        )

    def test_empty_object(self):
        """Test the empty object."""
        assert self.writer.render_expression(ObjectCons([])) == "{}"

    def test_key_quoting(self):
        """Test keys that are not plain identifiers."""
        expr = ObjectCons([
            ObjectItem(Literal("my key"), Literal(1)),
            ObjectItem(Literal("for"), Literal(2)),
        ])
        rendered = self.writer.render_expression(expr)
        assert '"my key" = 1' in rendered
        assert '"for"    = 2' in rendered

    def test_nested_object_in_tuple(self):
        """Test indentation of objects inside a tuple attribute."""
        body = Body()
        body.set_attribute("v", obj(r=TupleCons([obj(type=Traversal([RootSegment("string")]))])))
        assert self.writer.render(body) == (
            "v = {\n"
            "  r = [{\n"
            "    type = string\n"
            "  }]\n"
            "}\n"
        )

    def test_unary(self):
        """Test unary operators."""
        assert self.writer.render_expression(UnaryOp("-", Literal(3))) == "-3"

    def test_expressions_reparse(self):
        """Test that rendered expressions parse back to the same shape."""
        for source in ['"a-${b}"', '"%{if a}x%{else}y%{endif}"', "a ? b : c",
                       "[for v in l : v if v]", "{for k, v in m : k => v...}"]:
            expr = parse_expression(source)
            rendered = self.writer.render_expression(expr)
            assert parse_expression(rendered) == expr

    def test_opaque_from_source(self):
        """Test rendering of parsed calls through the body source."""
        body = parse_config('x = upper("a")\n')
        assert self.writer.render(body) == 'x = upper("a")\n'

    def test_write_file(self, temp_dir):
        """Test writing rendered text to disk."""
        body = Body()
        body.set_attribute("x", Literal(1))
        path = temp_dir / "nested" / "main.tf"
        size = self.writer.write(body, path)
        assert path.read_text(encoding="utf-8") == "x = 1\n"
        assert size == 6

    def test_write_failure(self, temp_dir):
        """Test that write errors become ConversionError."""
        with pytest.raises(ConversionError):
            self.writer.write(Body(), temp_dir)


class TestHelpers:
    """Tests for module helpers."""

    def test_is_identifier(self):
        """Test identifier detection."""
        assert is_identifier("aws_instance")
        assert is_identifier("my-name")
        assert not is_identifier("1abc")
        assert not is_identifier("a b")
        assert not is_identifier("")

    def test_escape_string_control_characters(self):
        """Test \\u escapes for control characters."""
        assert escape_string("a\x01b\tc") == "a\\u0001b\\tc"
