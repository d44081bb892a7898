"""Main entry point for the cloze indexing pass."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..common.display import progress
from .config import TIERS, AcquisitionConfig
from .encoding import ByteRange, Snippet
from .lexicon import Lexicon
from .reader import read_corpus_records
from .store import RecordWriter
from .tokenizer import (
    Segmenter,
    WordSegmenter,
    classify,
    escape_text,
    grapheme_length,
    split_sentences,
)

logger = logging.getLogger(__name__)

__all__ = [
    "IndexStats",
    "IndexResult",
    "build_range_index",
    "dedup_ranges",
    "tier_range_counts",
]

RangeIndex = Dict[int, List[ByteRange]]


@dataclass
class IndexStats:
    """Counters collected during the indexing pass."""
    records_read: int = 0
    records_skipped_score: int = 0
    sentences_seen: int = 0
    sentences_classified: int = 0
    sentences_rejected: int = 0
    sentences_too_short: int = 0
    snippets_written: int = 0


@dataclass
class IndexResult:
    """
    Output of the indexing pass.

    The range index lives only in memory. It is the sole key into the
    record store written by the same pass, so a store cannot be queried
    again without re-running the pass.

    Attributes:
        range_index: handle -> byte ranges of snippets crediting that entry
        store_path: Record store written by the pass
        stats: Pass counters
    """
    range_index: RangeIndex
    store_path: Path
    stats: IndexStats = field(default_factory=IndexStats)


def dedup_ranges(ranges: Sequence[ByteRange]) -> List[ByteRange]:
    """
    Drop consecutive duplicate ranges.

    Ranges are appended in write order and every range is strictly past the
    previous write, so a repeat can only follow its twin directly (a word
    appearing twice in one sentence).

    Example:
        >>> r = ByteRange(0, 10)
        >>> dedup_ranges([r, r, ByteRange(10, 20)])
        [ByteRange(start=0, end=10), ByteRange(start=10, end=20)]
    """
    return [key for key, _ in groupby(ranges)]


def _index_record(
    text: str,
    lexicon: Lexicon,
    segmenter: Segmenter,
    writer: RecordWriter,
    range_index: RangeIndex,
    stats: IndexStats,
    min_sentence_length: int,
) -> None:
    """Split, classify and store the qualifying sentences of one record."""
    sentences = split_sentences(escape_text(text))
    # Rejected sentences stay in the list as neighbor context
    analysis = [classify(sentence, lexicon, segmenter) for sentence in sentences]
    stats.sentences_seen += len(sentences)

    last = len(sentences) - 1
    for i, (sentence, handles) in enumerate(zip(sentences, analysis)):
        if handles is None:
            stats.sentences_rejected += 1
            continue
        stats.sentences_classified += 1

        if grapheme_length(sentence) < min_sentence_length:
            stats.sentences_too_short += 1
            continue

        snippet = Snippet(
            sentence=sentence,
            prefix=sentences[i - 1] if i > 0 else None,
            suffix=sentences[i + 1] if i < last else None,
        )
        byte_range = writer.write(snippet)
        stats.snippets_written += 1

        for handle in handles:
            range_index[handle].append(byte_range)


def build_range_index(
    lexicon: Lexicon,
    corpus_paths: Iterable[str | Path],
    store_path: str | Path,
    segmenter: Optional[Segmenter] = None,
    config: Optional[AcquisitionConfig] = None,
) -> IndexResult:
    """
    Scan the corpus once, storing qualifying sentences and indexing them.

    Orchestrates the indexing pass:
    1. Streams each corpus file, skipping records scored below the threshold
    2. Escapes the text and splits it into sentences
    3. Classifies each sentence against the lexicon
    4. Writes long-enough classified sentences, with neighbors, to the store
    5. Records the snippet's byte range under every credited handle
    6. Deduplicates each handle's ranges

    A malformed record or an I/O error aborts the pass. The store may then
    hold a valid prefix of records, but no index is returned for it.

    Args:
        lexicon: Loaded lexicon
        corpus_paths: JSON-lines corpus files, read in order
        store_path: Record store file to create
        segmenter: Word segmenter (default: jieba-backed WordSegmenter)
        config: Pass thresholds (default: AcquisitionConfig())

    Returns:
        IndexResult with the range index and pass counters
    """
    config = config or AcquisitionConfig()
    segmenter = segmenter or WordSegmenter()
    corpus_paths = [Path(p) for p in corpus_paths]
    store_path = Path(store_path)

    logger.info("Starting cloze indexing pass")
    logger.info(f"Corpus files: {len(corpus_paths)}")
    logger.info(f"Record store: {store_path}")
    start_time = datetime.now()

    range_index: RangeIndex = {handle: [] for handle in range(len(lexicon))}
    stats = IndexStats()

    with RecordWriter(store_path) as writer:
        for path in progress(corpus_paths, desc="Indexing corpus", unit=" files"):
            for record in read_corpus_records(path, max_records=config.max_records):
                stats.records_read += 1
                if record.score < config.score_threshold:
                    stats.records_skipped_score += 1
                    continue
                _index_record(
                    record.text,
                    lexicon,
                    segmenter,
                    writer,
                    range_index,
                    stats,
                    config.min_sentence_length,
                )
            logger.debug(f"Finished {path.name}: {writer.records_written:,} snippets so far")

    for handle, ranges in range_index.items():
        range_index[handle] = dedup_ranges(ranges)

    logger.info(
        f"Indexed {stats.snippets_written:,} snippets from {stats.records_read:,} records "
        f"in {datetime.now() - start_time}"
    )
    return IndexResult(range_index=range_index, store_path=store_path, stats=stats)


def tier_range_counts(lexicon: Lexicon, range_index: RangeIndex) -> Dict[int, int]:
    """
    Count indexed ranges per tier.

    Returns:
        tier -> total number of ranges across the tier's entries
    """
    counts = {tier: 0 for tier in TIERS}
    for handle, ranges in range_index.items():
        counts[lexicon.entry(handle).tier] += len(ranges)
    return counts
