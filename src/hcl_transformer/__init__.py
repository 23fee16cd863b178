"""
HCL Transformer - Bidirectional JSON and HCL configuration conversion.

Converts JSON documents into native HCL configuration text, recognizing
block definitions in the JSON layout, and serializes HCL configuration back
into JSON with expressions kept as ``${...}`` strings.
"""

from .hcl_transformer import HCLTransformer
from .types import ConversionOptions, Dialect, HCLResult, JSONResult, ConversionError

__version__ = "1.0.0"
__all__ = [
    "HCLTransformer",
    "ConversionOptions",
    "Dialect",
    "HCLResult",
    "JSONResult",
    "ConversionError",
]
