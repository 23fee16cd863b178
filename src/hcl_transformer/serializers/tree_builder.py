"""Path-indexed builder for the nested JSON shape of labeled blocks."""

from typing import Any, Dict, List, Set, Tuple

from ..types import ConversionError, ErrorType

Path = Tuple[str, ...]


class TreeBuilder:
    """
    Builds one JSON object level from attributes and labeled blocks.

    Nested objects are addressed by their key path from the root instead of
    being reached through shared mutable handles. A block of type ``t`` with
    labels ``l1 .. ln`` lands in ``root[t][l1]...[ln]``, which holds the list
    of that block's bodies.
    """

    def __init__(self):
        self.root: Dict[str, Any] = {}
        self._objects: Dict[Path, Dict[str, Any]] = {(): self.root}
        self._block_lists: Set[Path] = set()
        self._label_objects: Set[Path] = set()

    def set_attribute(self, name: str, value: Any) -> None:
        """Store a plain attribute value at the root level."""
        path = (name,)
        if path in self._block_lists or path in self._label_objects:
            raise ConversionError(
                f"attribute {name!r} collides with a block of the same name",
                ErrorType.STRUCTURE,
                context={"key": name}
            )
        self.root[name] = value

    def append_block(self, block_type: str, labels: List[str], value: Dict[str, Any]) -> None:
        """
        Append a serialized block body under its type and labels.

        Raises:
            ConversionError: If block and non-block data collide under one name
        """
        keys = [block_type] + list(labels)
        parent = self._object_at(tuple(keys[:-1]), block_type, labels)
        leaf = tuple(keys)
        key = keys[-1]

        if key in parent:
            if leaf not in self._block_lists:
                raise ConversionError(
                    f"invalid configuration for {key!r} block: "
                    "cannot have blocks with and without labels",
                    ErrorType.STRUCTURE,
                    context={"block": block_type, "labels": list(labels)}
                )
            parent[key].append(value)
        else:
            parent[key] = [value]
            self._block_lists.add(leaf)

    def _object_at(self, path: Path, block_type: str, labels: List[str]) -> Dict[str, Any]:
        if path in self._objects:
            return self._objects[path]
        parent = self._object_at(path[:-1], block_type, labels)
        key = path[-1]
        if key in parent:
            raise ConversionError(
                f"unable to convert block {'.'.join([block_type] + list(labels))}: "
                f"{key!r} already holds non-block data",
                ErrorType.STRUCTURE,
                context={"block": block_type, "labels": list(labels)}
            )
        parent[key] = {}
        self._objects[path] = parent[key]
        self._label_objects.add(path)
        return parent[key]
