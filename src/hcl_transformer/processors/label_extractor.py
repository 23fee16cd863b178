"""Label and content extraction for JSON block instances."""

from typing import Any, Dict, List, Tuple
from ..models.values import is_object, single_item, sole_element
from ..types import ConversionError, ErrorType


def extract_labels_and_content(instance: Any) -> Tuple[List[str], Dict[str, Any]]:
    """
    Split one block instance into its labels and its content object.

    Labels are nested as ``{label: [{second_label: [{...content...}]}]}``,
    each level being a single-key object whose value is a one-element list.
    At most two labels are taken this way; deeper label paths are written
    in the object form.

    Args:
        instance: One element of a block list, already stripped of its type key

    Returns:
        Tuple of (labels, content)

    Raises:
        ConversionError: With MISMATCH type when the instance is not an object
    """
    if not is_object(instance):
        raise ConversionError(
            f"block instance is not an object: {type(instance).__name__}",
            ErrorType.MISMATCH
        )

    item = single_item(instance)
    if item is None:
        # several keys, or none: plain content without labels
        return [], dict(instance)

    key, value = item
    found, element = sole_element(value)
    if not found or not is_object(element):
        # no label list below the key: plain content
        return [], dict(instance)

    inner_item = single_item(element)
    if inner_item is None:
        return [key], dict(element)

    inner_key, inner_value = inner_item
    found, content = sole_element(inner_value)
    if found and is_object(content):
        return [key, inner_key], dict(content)
    return [key], {inner_key: inner_value}
