"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def variable_json():
    """Variable declaration in nested object form."""
    return '{"variable": {"region": [{"type": "string"}]}}'


@pytest.fixture
def subnets_json():
    """Flat list of plain records."""
    return (
        '{"subnets": ['
        '{"name": "a", "cidr": "10.0.0.0/24"}, '
        '{"name": "b", "cidr": "10.0.1.0/24"}'
        ']}'
    )


@pytest.fixture
def resource_hcl():
    """Labeled resource block."""
    return (
        'resource "aws_instance" "web" {\n'
        '  ami = "ami-1"\n'
        '  instance_type = var.instance_type\n'
        '}\n'
    )


@pytest.fixture
def sample_config():
    """Configuration exercising attributes, blocks and expressions."""
    return '''# sample configuration
region = "us-east-1"
count  = 3

variable "name" {
  type    = string
  default = "web-${terraform.workspace}"
}

resource "aws_instance" "web" {
  ami           = data.aws_ami.ubuntu.id
  instance_type = upper("t3.micro")
  tags = {
    Name = "web"
    Env  = var.env
  }
}

locals {
  enabled = !false
  ports   = [80, 443]
}
'''
