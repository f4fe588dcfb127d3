"""Encode/decode primitives: query strings, JSON bodies and field codecs."""

from .body import DecodeContext, decode_json, encode_json, parse_json, validate_document
from .fields import Base62Int, JsonString, base62_decode, base62_encode
from .query import decode_query, encode_query

__all__ = [
    "encode_query",
    "decode_query",
    "decode_json",
    "encode_json",
    "parse_json",
    "validate_document",
    "DecodeContext",
    "Base62Int",
    "JsonString",
    "base62_encode",
    "base62_decode",
]
