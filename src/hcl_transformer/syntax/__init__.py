"""Native configuration syntax frontend."""

from .parser import Parser, parse_config, parse_expression
from .tokens import ParseError, Token, tokenize

__all__ = ["Parser", "parse_config", "parse_expression", "ParseError", "Token", "tokenize"]
