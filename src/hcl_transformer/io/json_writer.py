"""JSON writer for serialized configuration documents."""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import simplejson

from ..types import ConversionError, ErrorType


class JSONWriter:
    """
    Writer for pretty-printed JSON output.

    Numbers are written exactly: integral values as integers, everything
    else as the decimal text it was parsed from.
    """

    def __init__(self, indent: int = 2, logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON writer.

        Args:
            indent: Indentation width
            logger: Optional logger instance
        """
        self.indent = indent
        self.logger = logger or logging.getLogger(__name__)

    def dumps(self, value: Any) -> str:
        """Format a generic value as JSON text."""
        return simplejson.dumps(self._plain(value), indent=self.indent,
                                ensure_ascii=False, use_decimal=True)

    def write(self, value: Any, output_path: Union[str, Path]) -> int:
        """
        Write a generic value as JSON to a file.

        Returns:
            Number of bytes written

        Raises:
            ConversionError: If the file cannot be written
        """
        text = self.dumps(value) + "\n"
        try:
            path = Path(output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise ConversionError(
                f"Failed to write {output_path}: {e}",
                ErrorType.OPTIONS,
                context={"output_path": str(output_path)}
            )
        size = len(text.encode("utf-8"))
        self.logger.info(f"Wrote {size} bytes to {output_path}")
        return size

    def _plain(self, value: Any) -> Any:
        if isinstance(value, Decimal):
            # 2.0 and 1E+2 as integers; huge exponents stay in decimal notation
            if value == value.to_integral_value() and value.adjusted() < 64:
                return int(value)
            return value
        if isinstance(value, list):
            return [self._plain(item) for item in value]
        if isinstance(value, dict):
            return {key: self._plain(item) for key, item in value.items()}
        return value
