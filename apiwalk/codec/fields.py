"""Field codecs for alternate textual encodings inside body models.

These are plain pydantic annotated types; the endpoint and pagination layers
never look inside them.

    class Item(BaseModel):
        id: Base62Int                   # "4C92" <-> 1000000
        labels: JsonString[list[str]]   # '["a","b"]' <-> ["a", "b"]
"""

from __future__ import annotations

from typing import Annotated, Any

import pydantic_core
from pydantic import BeforeValidator, Field, PlainSerializer

BASE62_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
_BASE62_INDEX = {char: i for i, char in enumerate(BASE62_ALPHABET)}


def base62_encode(value: int) -> str:
    if value < 0:
        raise ValueError("base-62 encoding requires a non-negative integer")
    if value == 0:
        return BASE62_ALPHABET[0]
    digits = []
    while value:
        value, rem = divmod(value, 62)
        digits.append(BASE62_ALPHABET[rem])
    return "".join(reversed(digits))


def base62_decode(text: str) -> int:
    if not text:
        raise ValueError("empty base-62 string")
    value = 0
    for char in text:
        try:
            value = value * 62 + _BASE62_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base-62 character {char!r}") from None
    return value


def _parse_base62(value: Any) -> Any:
    if isinstance(value, str):
        return base62_decode(value)
    return value


Base62Int = Annotated[
    int,
    BeforeValidator(_parse_base62),
    Field(ge=0),
    PlainSerializer(base62_encode, return_type=str),
]


def _parse_json_string(value: Any) -> Any:
    if isinstance(value, (str, bytes, bytearray)):
        return pydantic_core.from_json(value)
    return value


def _dump_json_string(value: Any) -> str:
    return pydantic_core.to_json(value).decode()


class JsonString:
    """``JsonString[T]``: a ``T`` transported as a JSON-encoded string."""

    def __class_getitem__(cls, item: Any) -> Any:
        return Annotated[
            item,
            BeforeValidator(_parse_json_string),
            PlainSerializer(_dump_json_string, return_type=str),
        ]
