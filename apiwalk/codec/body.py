"""JSON body decoding with field-path error locations.

Two ways of decoding are supported and both report failures as
``BodyDecodeError`` carrying the exact ``FieldPath``:

- ``decode_json`` / ``validate_document`` validate against any pydantic type;
  the failing ``loc`` of the first validation error becomes the path.
- ``DecodeContext`` is an explicit path stack for hand-written decoding. It is
  passed to whatever code descends into the document and records each field
  or index entered, so ``fail()`` always knows where it is.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, NoReturn, TypeVar

import pydantic_core
from pydantic import TypeAdapter, ValidationError

from ..core.exceptions import BodyDecodeError
from ..core.field_path import FieldPath, Segment

T = TypeVar("T")

_MISSING = object()


@lru_cache(maxsize=256)
def _cached_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _adapter(type_: Any) -> TypeAdapter[Any]:
    try:
        hash(type_)
    except TypeError:
        # Annotated metadata such as discriminated-union FieldInfo
        return TypeAdapter(type_)
    return _cached_adapter(type_)


def _from_validation_error(
    error: ValidationError, document: Any, at: FieldPath | None = None
) -> BodyDecodeError:
    first = error.errors(include_url=False)[0]
    path = FieldPath.from_loc(first["loc"], document)
    return BodyDecodeError(FieldPath((*(at or ()), *path)), first["msg"])


def parse_json(body: bytes | str) -> Any:
    """Parse raw JSON into plain Python values."""
    try:
        return pydantic_core.from_json(body)
    except ValueError as exc:
        raise BodyDecodeError(FieldPath(), f"invalid JSON: {exc}") from exc


def validate_document(
    document: Any, type_: type[T] | Any, *, at: FieldPath | None = None
) -> T:
    """Validate an already parsed JSON document against ``type_``.

    ``at`` is the location of ``document`` inside the full body; reported
    paths are prefixed with it.
    """
    try:
        return _adapter(type_).validate_python(document)
    except ValidationError as exc:
        raise _from_validation_error(exc, document, at) from exc


def decode_json(body: bytes | str, type_: type[T] | Any) -> T:
    """Decode JSON bytes into ``type_`` (any type pydantic can validate).

    Raises:
        BodyDecodeError: With the path of the first failing field.
    """
    try:
        return _adapter(type_).validate_json(body)
    except ValidationError as exc:
        try:
            document = pydantic_core.from_json(body)
        except ValueError:
            document = None
        raise _from_validation_error(exc, document) from exc


def encode_json(value: Any) -> bytes:
    """Serialize a request body (models, dataclasses, plain values) to JSON bytes."""
    return pydantic_core.to_json(value, by_alias=True)


class DecodeContext:
    """Path-tracking context for decoding a nested document by hand.

    Example:
        >>> ctx = DecodeContext()
        >>> with ctx.field("items"), ctx.index(2):
        ...     str(ctx.path)
        'items[2]'
    """

    def __init__(self, path: FieldPath | None = None) -> None:
        self._stack: list[Segment] = list(path or ())

    @property
    def path(self) -> FieldPath:
        return FieldPath(tuple(self._stack))

    @contextmanager
    def field(self, name: str) -> Iterator[DecodeContext]:
        self._stack.append(name)
        try:
            yield self
        finally:
            self._stack.pop()

    @contextmanager
    def index(self, position: int) -> Iterator[DecodeContext]:
        self._stack.append(position)
        try:
            yield self
        finally:
            self._stack.pop()

    def fail(self, message: str) -> NoReturn:
        raise BodyDecodeError(self.path, message)

    def expect(self, value: Any, expected: type | tuple[type, ...]) -> Any:
        """Check ``value`` has the expected type at the current path."""
        # bool is an int subclass; never accept it where a number is wanted
        if isinstance(value, bool) and bool not in _as_tuple(expected):
            self.fail(f"expected {_type_names(expected)}, got bool")
        if not isinstance(value, expected):
            self.fail(f"expected {_type_names(expected)}, got {type(value).__name__}")
        return value

    def member(self, container: Any, segment: Segment) -> Any:
        """Return ``container[segment]`` (or the attribute), or ``_MISSING``."""
        if isinstance(segment, int):
            if isinstance(container, Sequence) and not isinstance(container, str):
                return container[segment] if -len(container) <= segment < len(container) else _MISSING
            self.fail(f"expected a list, got {type(container).__name__}")
        if isinstance(container, Mapping):
            return container.get(segment, _MISSING)
        if container is None or isinstance(container, (str, int, float, bool, list)):
            self.fail(f"expected an object, got {type(container).__name__}")
        return getattr(container, segment, _MISSING)

    def lookup(
        self,
        document: Any,
        path: FieldPath | str,
        expected: type | tuple[type, ...] | None = None,
        *,
        required: bool = True,
    ) -> Any:
        """Walk ``path`` into ``document``, tracking each step.

        Returns ``None`` for a missing or null value when ``required`` is false.
        """
        if isinstance(path, str):
            path = FieldPath.parse(path)
        pushed = 0
        try:
            node = document
            for segment in path:
                node = self.member(node, segment)
                self._stack.append(segment)
                pushed += 1
                if node is _MISSING or node is None:
                    if required:
                        self.fail("missing field" if node is _MISSING else "field is null")
                    return None
            if expected is not None:
                self.expect(node, expected)
            return node
        finally:
            del self._stack[len(self._stack) - pushed :]


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _type_names(expected: type | tuple[type, ...]) -> str:
    return " or ".join(t.__name__ for t in _as_tuple(expected))
