"""Append-only record store addressed by byte ranges."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from .encoding import ByteRange, decode_snippet, encode_snippet

logger = logging.getLogger(__name__)

__all__ = [
    "RecordWriter",
    "RecordReader",
]


class RecordWriter:
    """
    Appends encoded records to a single file.

    Each write returns the byte range its record occupies. Nothing else
    about the record is stored, so the returned ranges are the only way
    back into the file.
    """

    def __init__(
        self,
        path: str | Path,
        encoder: Callable[[Any], bytes] = encode_snippet,
    ):
        """
        Create (or truncate) the store file.

        Args:
            path: Store file path
            encoder: Function turning a record into bytes
        """
        self.path = Path(path)
        self.encoder = encoder
        self.position = 0
        self.records_written = 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "wb")
        logger.debug(f"Opened record store for writing: {self.path}")

    def write(self, record: Any) -> ByteRange:
        """
        Encode a record and append it to the store.

        Args:
            record: Record to store

        Returns:
            Range of offsets the record occupies
        """
        data = self.encoder(record)
        self._file.write(data)

        start = self.position
        self.position += len(data)
        self.records_written += 1
        return ByteRange(start, self.position)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.debug(
                f"Closed record store {self.path}: "
                f"{self.records_written:,} records, {self.position:,} bytes"
            )

    def __enter__(self) -> "RecordWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class RecordReader:
    """
    Random-access reader for a store written by RecordWriter.

    Ranges must come from a write to the same file. The reader does not
    check them: a foreign range fails to decode or decodes garbage.
    """

    def __init__(
        self,
        path: str | Path,
        decoder: Callable[[bytes], Any] = decode_snippet,
    ):
        self.path = Path(path)
        self.decoder = decoder
        self._file = open(self.path, "rb")

    def read(self, byte_range: ByteRange) -> Any:
        """
        Read and decode the record at a byte range.

        Args:
            byte_range: Range returned by RecordWriter.write

        Returns:
            Decoded record
        """
        self._file.seek(byte_range.start)
        data = self._file.read(byte_range.length)
        return self.decoder(data)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "RecordReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
