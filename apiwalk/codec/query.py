"""Query string codec.

Convention:
    - Mapping keys are sorted at every level, so equal parameter sets always
      encode to the same string.
    - Nested mappings use bracket notation: ``filter[state]=open``.
    - Sequences use indexed brackets: ``ids[0]=1&ids[1]=2``.
    - Scalars render as text: ``True`` -> ``true``, enums by value, dates and
      datetimes as ISO-8601, numbers with ``str()``.
    - ``None`` and empty containers are omitted.
    - Keys and values are percent-encoded; the brackets of the key syntax are
      left literal, so keys themselves may not contain ``[`` or ``]``.
    - A nested mapping whose keys are exactly ``"0"`` to ``"n-1"`` is rejected,
      because it would encode the same as a sequence.

``decode_query`` inverts the convention, rebuilding lists from containers whose
keys are exactly ``0..n-1``. Values come back as strings.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, quote

from pydantic import BaseModel

from ..core.exceptions import QueryEncodingError

_SAFE_KEY = "[]"


def _render_scalar(value: Any, name: str) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise QueryEncodingError(name, f"unsupported value type {type(value).__name__}")


def _check_key(key: Any, parent: str) -> str:
    shown = f"{parent}[{key}]" if parent else str(key)
    if not isinstance(key, str):
        raise QueryEncodingError(shown, f"keys must be strings, not {type(key).__name__}")
    if not key:
        raise QueryEncodingError(shown, "keys must not be empty")
    if "[" in key or "]" in key:
        raise QueryEncodingError(shown, "keys must not contain brackets")
    return key


def _flatten(
    value: Any, name: str, pairs: list[tuple[str, str]], active: set[int]
) -> None:
    if value is None:
        return
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        marker = id(value)
        if marker in active:
            raise QueryEncodingError(name, "cyclic structure")
        if value and set(value) == {str(i) for i in range(len(value))}:
            raise QueryEncodingError(name, "mapping keys 0..n-1 are reserved for sequences")
        active.add(marker)
        for key in sorted(value, key=str):
            child = _check_key(key, name)
            _flatten(value[key], f"{name}[{child}]", pairs, active)
        active.discard(marker)
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        marker = id(value)
        if marker in active:
            raise QueryEncodingError(name, "cyclic structure")
        active.add(marker)
        for index, item in enumerate(value):
            _flatten(item, f"{name}[{index}]", pairs, active)
        active.discard(marker)
    else:
        pairs.append((name, _render_scalar(value, name)))


def encode_query(params: Mapping[str, Any] | BaseModel | None) -> str:
    """Encode a parameter set into a query string (without the leading ``?``).

    Raises:
        QueryEncodingError: If a key or value cannot be represented.
    """
    if params is None:
        return ""
    if isinstance(params, BaseModel):
        params = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    if not isinstance(params, Mapping):
        raise QueryEncodingError("", f"expected a mapping, not {type(params).__name__}")

    pairs: list[tuple[str, str]] = []
    active = {id(params)}
    for key in sorted(params, key=str):
        _flatten(params[key], _check_key(key, ""), pairs, active)
    return "&".join(f"{quote(k, safe=_SAFE_KEY)}={quote(v, safe='')}" for k, v in pairs)


def _split_key(key: str) -> list[str]:
    head, bracket, rest = key.partition("[")
    parts = [head]
    while bracket:
        inner, _, rest = rest.partition("]")
        parts.append(inner)
        _, bracket, rest = rest.partition("[")
    return parts


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(child) for key, child in node.items()}
    if converted and set(converted) == {str(i) for i in range(len(converted))}:
        return [converted[str(i)] for i in range(len(converted))]
    return converted


def decode_query(query: str) -> dict[str, Any]:
    """Decode a query string produced by ``encode_query``."""
    root: dict[str, Any] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        parts = _split_key(key)
        node = root
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise ValueError(f"query key {key!r} conflicts with a scalar value")
        node[parts[-1]] = value
    return {key: _listify(child) for key, child in root.items()}
