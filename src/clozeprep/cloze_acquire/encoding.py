"""Encoding utilities for the snippet record store.

Records are stored back to back with no framing:
    [record 0 bytes][record 1 bytes][record 2 bytes]...

Each record is a compact UTF-8 JSON object, so it decodes on its own once
its byte range is known. The ranges themselves are never written to the
store; the caller keeps them.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "ByteRange",
    "Snippet",
    "encode_record",
    "decode_record",
    "encode_snippet",
    "decode_snippet",
]


@dataclass(frozen=True, order=True)
class ByteRange:
    """Half-open [start, end) offsets of one record in the store file."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Snippet:
    """A sentence with its immediate neighbors from the same source text.

    prefix/suffix are None when the sentence sits at the start/end of its
    record. An empty string is a real (empty) neighbor.
    """
    sentence: str
    prefix: Optional[str] = None
    suffix: Optional[str] = None


def encode_record(obj: Any) -> bytes:
    """
    Encode a JSON-serializable object as compact UTF-8 bytes.

    Args:
        obj: Object to encode

    Returns:
        Encoded bytes

    Example:
        >>> encode_record({"a": "猫"})
        b'{"a":"\\xe7\\x8c\\xab"}'
    """
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_record(data: bytes) -> Any:
    """
    Decode bytes produced by encode_record.

    Raises:
        ValueError: If the bytes are not a complete JSON document
    """
    return json.loads(data.decode("utf-8"))


def encode_snippet(snippet: Snippet) -> bytes:
    """
    Encode a snippet into record bytes.

    Example:
        >>> encode_snippet(Snippet("它很可爱", prefix=None, suffix=""))
        b'{"prefix":null,"sentence":"\\xe5\\xae\\x83\\xe5\\xbe\\x88\\xe5\\x8f\\xaf\\xe7\\x88\\xb1","suffix":""}'
    """
    return encode_record(
        {
            "prefix": snippet.prefix,
            "sentence": snippet.sentence,
            "suffix": snippet.suffix,
        }
    )


def decode_snippet(data: bytes) -> Snippet:
    """
    Decode record bytes into a snippet.

    Args:
        data: Bytes of exactly one encoded snippet

    Returns:
        Decoded Snippet

    Raises:
        ValueError: If the bytes are not an encoded snippet
    """
    obj = decode_record(data)
    if not isinstance(obj, dict) or not isinstance(obj.get("sentence"), str):
        raise ValueError(f"Not a snippet record: {data[:60]!r}")
    return Snippet(
        sentence=obj["sentence"],
        prefix=obj.get("prefix"),
        suffix=obj.get("suffix"),
    )
