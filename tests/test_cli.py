"""Tests for the command-line interface."""

import json
from click.testing import CliRunner
from hcl_transformer import __version__
from hcl_transformer.cli import main


class TestCLI:
    """Tests for the hcl-transformer command."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_to_hcl_from_stdin(self, variable_json):
        """Test converting standard input."""
        result = self.runner.invoke(main, ["to-hcl"], input=variable_json)
        assert result.exit_code == 0
        assert result.output == 'variable "region" {\n  type = string\n}\n'

    def test_keep_arrays_nested(self, variable_json):
        """Test the values file switch."""
        result = self.runner.invoke(main, ["to-hcl", "--keep-arrays-nested"], input=variable_json)
        assert result.exit_code == 0
        assert result.output.startswith("variable = {\n")

    def test_conflicting_flags(self, variable_json):
        """Test that both switches together fail."""
        result = self.runner.invoke(
            main, ["to-hcl", "--treat-arrays-as-blocks", "--keep-arrays-nested"],
            input=variable_json
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_to_hcl_invalid_input(self):
        """Test the error message for bad JSON."""
        result = self.runner.invoke(main, ["to-hcl"], input="{")
        assert result.exit_code == 1
        assert "unable to convert to native HCL" in result.output

    def test_to_hcl_files(self, variable_json):
        """Test input and output files."""
        with self.runner.isolated_filesystem():
            with open("in.json", "w") as f:
                f.write(variable_json)
            result = self.runner.invoke(main, ["to-hcl", "in.json", "-o", "main.tf"])
            assert result.exit_code == 0
            with open("main.tf") as f:
                assert f.read() == 'variable "region" {\n  type = string\n}\n'

    def test_tfvars_output_implies_nesting(self, variable_json):
        """Test the dialect hint from the output name."""
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main, ["to-hcl", "-o", "prod.tfvars"], input=variable_json)
            assert result.exit_code == 0
            with open("prod.tfvars") as f:
                assert f.read().startswith("variable = {\n")

    def test_to_json(self, resource_hcl):
        """Test converting configuration to JSON."""
        result = self.runner.invoke(main, ["to-json"], input=resource_hcl)
        assert result.exit_code == 0
        assert result.output.endswith("}\n")
        data = json.loads(result.output)
        assert data["resource"]["aws_instance"]["web"][0]["ami"] == "ami-1"

    def test_to_json_parse_error(self):
        """Test the error message for bad configuration."""
        result = self.runner.invoke(main, ["to-json"], input="a = \n")
        assert result.exit_code == 1
        assert "unable to convert HCL to JSON" in result.output

    def test_version(self):
        """Test the version option."""
        result = self.runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
