"""Generic value model shared by both conversion directions.

A generic value is what ``json.loads`` produces, with numbers kept exact:
``None``, ``bool``, ``int`` or ``Decimal``, ``str``, ``list`` and ``dict``
(insertion ordered, unique keys).
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

Number = Union[int, Decimal]
GenericValue = Union[None, bool, Number, str, List[Any], Dict[str, Any]]


def is_list(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def single_item(value: Any) -> Optional[Tuple[str, Any]]:
    """Return the only (key, value) pair of a one-key object, else None."""
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value.items()))
    return None


def sole_element(value: Any) -> Tuple[bool, Any]:
    """
    Unpack a one-element list.

    Returns:
        ``(True, element)`` for a one-element list, ``(False, None)`` otherwise
    """
    if isinstance(value, list) and len(value) == 1:
        return True, value[0]
    return False, None


def number_text(value: Number) -> str:
    """Render a number exactly, without exponent noise for integral decimals."""
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        value = Decimal(repr(value))
    if value == value.to_integral_value() and value.adjusted() < 64:
        return str(int(value))
    return str(value)
