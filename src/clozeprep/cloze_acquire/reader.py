"""Corpus file discovery and JSON-lines record reading."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterator

from .config import MAX_RECORDS_PER_SOURCE

logger = logging.getLogger(__name__)

__all__ = [
    "CorpusRecord",
    "discover_corpus_files",
    "parse_corpus_line",
    "read_corpus_records",
]


@dataclass(frozen=True)
class CorpusRecord:
    """One corpus line: a block of text and its quality score."""
    text: str
    score: float


def discover_corpus_files(corpus_dir: Path, pattern: str = "part-*.jsonl") -> list[Path]:
    """
    Discover the JSON-lines part files of a corpus.

    Args:
        corpus_dir: Directory containing corpus part files
        pattern: Glob pattern for part files

    Returns:
        Sorted list of part file paths

    Example:
        >>> files = discover_corpus_files(Path("/data/wudao"))
        >>> files[0]
        PosixPath('/data/wudao/part-0000.jsonl')
    """
    corpus_dir = Path(corpus_dir)
    if not corpus_dir.exists():
        raise ValueError(f"Corpus directory does not exist: {corpus_dir}")

    files = sorted(corpus_dir.glob(pattern))
    if not files:
        raise ValueError(f"No corpus files matching {pattern!r} found in {corpus_dir}")

    logger.info(f"Found {len(files)} corpus files")
    return files


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def parse_corpus_line(line: str) -> CorpusRecord:
    """
    Parse one corpus line.

    Args:
        line: JSON object with "text" (string) and "score" (number)

    Returns:
        CorpusRecord

    Raises:
        ValueError: If the line is not such an object

    Example:
        >>> parse_corpus_line('{"text": "它很可爱。", "score": 0.9}')
        CorpusRecord(text='它很可爱。', score=0.9)
    """
    obj = json.loads(line, parse_constant=_reject_constant)
    if not isinstance(obj, dict):
        raise ValueError("record is not a JSON object")

    text = obj.get("text")
    score = obj.get("score")
    if not isinstance(text, str):
        raise ValueError("record has no string 'text' field")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValueError("record has no numeric 'score' field")
    return CorpusRecord(text=text, score=float(score))


def read_corpus_records(
    path: Path,
    max_records: int = MAX_RECORDS_PER_SOURCE,
) -> Iterator[CorpusRecord]:
    """
    Stream records from a JSON-lines corpus file.

    Only the first max_records lines are read. A line that fails to parse
    aborts the read; there is no skip-and-continue.

    Args:
        path: Corpus file
        max_records: Maximum number of lines to read

    Yields:
        CorpusRecord for each line

    Raises:
        ValueError: On a malformed line (file and line number in message)
    """
    path = Path(path)
    logger.debug(f"Reading {path.name} (max_records={max_records:,})")

    with open(path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(islice(f, max_records), start=1):
            try:
                record = parse_corpus_line(line)
            except ValueError as e:
                logger.error(f"Malformed record at {path}:{line_num}: {e}")
                raise ValueError(f"Malformed corpus record at {path}:{line_num}: {e}") from e
            yield record
