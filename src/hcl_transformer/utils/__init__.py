"""Utility modules for the HCL Transformer."""

from .validation import ValidationUtils, load_json

__all__ = ["ValidationUtils", "load_json"]
