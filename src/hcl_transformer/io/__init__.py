"""Output writers for the HCL Transformer."""

from .hcl_writer import HCLWriter
from .json_writer import JSONWriter

__all__ = ["HCLWriter", "JSONWriter"]
