"""Field paths locating a value inside a nested decoded structure."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

Segment = str | int

_NO_DOCUMENT: Any = object()


def _child(node: Any, segment: Segment) -> Any:
    if isinstance(segment, int) and isinstance(node, list):
        return node[segment] if 0 <= segment < len(node) else _NO_DOCUMENT
    if isinstance(segment, str) and isinstance(node, Mapping):
        return node.get(segment, _NO_DOCUMENT)
    return _NO_DOCUMENT


@dataclass(frozen=True)
class FieldPath:
    """Ordered field names and sequence indices, outermost first.

    Rendered the way a reader would index into the JSON document:

        >>> str(FieldPath(("items", 2, "total")))
        'items[2].total'
        >>> str(FieldPath(()))
        '.'
    """

    segments: tuple[Segment, ...] = ()

    @classmethod
    def from_loc(cls, loc: Iterable[Segment], document: Any = _NO_DOCUMENT) -> FieldPath:
        """Build a path from a pydantic error ``loc`` tuple.

        With the validated ``document`` given, ``loc`` is walked through it and
        segments that do not address anything in the document (the member
        labels pydantic adds for union and tagged-union branches, such as
        ``int`` in ``total.int`` or ``cat`` in ``[0].cat.lives``) are dropped.
        The last segment is kept when it names a member of an object or list,
        so missing fields are still located.
        """
        segments = tuple(loc)
        if document is _NO_DOCUMENT:
            return cls(segments)
        kept: list[Segment] = []
        node = document
        for position, segment in enumerate(segments):
            child = _child(node, segment)
            if child is not _NO_DOCUMENT:
                kept.append(segment)
                node = child
            elif position == len(segments) - 1 and isinstance(node, (Mapping, list)):
                kept.append(segment)
        return cls(tuple(kept))

    @classmethod
    def parse(cls, text: str) -> FieldPath:
        """Parse the rendered form (``items[2].total``) back into a path."""
        segments: list[Segment] = []
        for part in text.split("."):
            if not part:
                continue
            name, _, rest = part.partition("[")
            if name:
                segments.append(name)
            while rest:
                index, _, rest = rest.partition("]")
                segments.append(int(index))
                rest = rest.removeprefix("[")
        return cls(tuple(segments))

    def child(self, segment: Segment) -> FieldPath:
        return FieldPath((*self.segments, segment))

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        if not self.segments:
            return "."
        out = ""
        for segment in self.segments:
            if isinstance(segment, int):
                out += f"[{segment}]"
            elif out:
                out += f".{segment}"
            else:
                out = segment
        return out
