"""Configuration and data structures for cloze acquisition."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

__all__ = [
    "TIERS",
    "AGGREGATE_TIER",
    "AGGREGATE_TIER_LABEL",
    "SCORE_THRESHOLD",
    "MIN_SENTENCE_LENGTH",
    "MAX_RECORDS_PER_SOURCE",
    "SAMPLE_SIZE",
    "CorpusConfig",
    "AcquisitionConfig",
    "DeckConfig",
    "build_corpus_config",
    "build_store_path",
]

# Proficiency tiers, lowest first. Tier 7 aggregates source levels 7-9.
TIERS = (1, 2, 3, 4, 5, 6, 7)
AGGREGATE_TIER = 7
AGGREGATE_TIER_LABEL = "7-9"

SCORE_THRESHOLD = 0.8
MIN_SENTENCE_LENGTH = 10
MAX_RECORDS_PER_SOURCE = 100_000
SAMPLE_SIZE = 50


@dataclass
class CorpusConfig:
    """Configuration for a JSON-lines corpus.

    Attributes:
        name: Corpus name (used in banners and logs)
        paths: Corpus files, read in the given order
        max_records: Maximum lines read from each file
    """
    name: str
    paths: List[Path]
    max_records: int = MAX_RECORDS_PER_SOURCE


@dataclass
class AcquisitionConfig:
    """Configuration for the indexing pass.

    Attributes:
        score_threshold: Records scoring strictly below this are skipped
        min_sentence_length: Minimum sentence length in grapheme clusters
        max_records: Maximum lines read from each corpus file
    """
    score_threshold: float = SCORE_THRESHOLD
    min_sentence_length: int = MIN_SENTENCE_LENGTH
    max_records: int = MAX_RECORDS_PER_SOURCE


@dataclass
class DeckConfig:
    """Configuration for deck assembly.

    Attributes:
        deck_dir: Directory receiving one .apkg per tier
        sample_size: Maximum cards per tier
        seed: Seed for the sampling shuffle (None for a fresh shuffle)
        tiers: Tiers to build decks for
    """
    deck_dir: Path
    sample_size: int = SAMPLE_SIZE
    seed: Optional[int] = None
    tiers: tuple = TIERS


def build_corpus_config(
    corpus_dir: str | Path,
    pattern: str = "part-*.jsonl",
    max_records: int = MAX_RECORDS_PER_SOURCE,
) -> CorpusConfig:
    """Build a corpus configuration from a directory of JSON-lines parts.

    Args:
        corpus_dir: Directory containing corpus part files
        pattern: Glob pattern selecting the part files
        max_records: Maximum lines read from each file

    Returns:
        CorpusConfig named after the directory
    """
    from .reader import discover_corpus_files

    corpus_dir = Path(corpus_dir)
    return CorpusConfig(
        name=corpus_dir.name,
        paths=discover_corpus_files(corpus_dir, pattern=pattern),
        max_records=max_records,
    )


def build_store_path(output_dir: str | Path, corpus_name: str) -> Path:
    """Build the record store path from an output directory and corpus name.

    Example:
        >>> build_store_path("/scratch/cloze", "wudao")
        PosixPath('/scratch/cloze/wudao/snippets.db')
    """
    return Path(output_dir) / corpus_name / "snippets.db"
