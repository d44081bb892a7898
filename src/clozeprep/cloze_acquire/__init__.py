"""
Cloze acquisition pipeline for indexing a raw text corpus.

This module scans JSON-lines corpus files once, keeps sentences whose
every word is in a tiered vocabulary lexicon, stores them in an
append-only record file and indexes them by vocabulary entry.

Main entry point:
    build_range_index() - Full indexing pass

Key components:
    - lexicon: Tiered vocabulary loading and lookup
    - tokenizer: Sentence splitting, segmentation and classification
    - reader: Corpus file discovery and record parsing
    - store: Byte-range addressed record store
    - encoding: Record encoding and value types
"""

from .config import (
    CorpusConfig,
    AcquisitionConfig,
    DeckConfig,
    build_corpus_config,
    build_store_path,
)
from .core import IndexResult, IndexStats, build_range_index, dedup_ranges, tier_range_counts
from .encoding import ByteRange, Snippet
from .lexicon import Lexicon, VocabEntry, build_lexicon, load_lexicon
from .store import RecordReader, RecordWriter
from .tokenizer import WordSegmenter, classify, classify_tokens, split_sentences

__all__ = [
    "build_range_index",
    "dedup_ranges",
    "tier_range_counts",
    "IndexResult",
    "IndexStats",
    "CorpusConfig",
    "AcquisitionConfig",
    "DeckConfig",
    "build_corpus_config",
    "build_store_path",
    "ByteRange",
    "Snippet",
    "Lexicon",
    "VocabEntry",
    "build_lexicon",
    "load_lexicon",
    "RecordReader",
    "RecordWriter",
    "WordSegmenter",
    "classify",
    "classify_tokens",
    "split_sentences",
]
