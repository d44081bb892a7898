"""Shared fixtures for the clozeprep test suite."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from clozeprep.cloze_acquire.lexicon import build_lexicon


def write_corpus(path: Path, records: list[dict[str, Any]]) -> Path:
    """Write records as a JSON-lines corpus file."""
    with open(path, "w", encoding="utf-8") as f:
        for rec in records:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return path


@pytest.fixture
def split_segmenter():
    """Whitespace word segmentation, so tests control every token."""
    return str.split


@pytest.fixture
def english_lexicon():
    """the/cat at tier 1, sleeps at tier 2, quietly at tier 3."""
    return build_lexicon([
        ("the", 1),
        ("cat", 1),
        ("sleeps", 2),
        ("quietly", 3),
    ])


@pytest.fixture
def corpus_file(tmp_path):
    def _make(records, name="part-0000.jsonl"):
        return write_corpus(tmp_path / name, records)
    return _make
