"""Per-tier snippet sampling for deck assembly."""
from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from ..cloze_acquire.config import SAMPLE_SIZE
from ..cloze_acquire.encoding import ByteRange, Snippet
from ..cloze_acquire.lexicon import Lexicon, VocabEntry
from ..cloze_acquire.store import RecordReader

logger = logging.getLogger(__name__)

__all__ = [
    "context_score",
    "rank_by_context",
    "sample_tier",
]


def context_score(snippet: Snippet) -> int:
    """Number of neighbor sentences present (0, 1 or 2)."""
    score = 0
    if snippet.prefix is not None:
        score += 1
    if snippet.suffix is not None:
        score += 1
    return score


def rank_by_context(
    pairs: Sequence[Tuple[Snippet, VocabEntry]],
    rng: Optional[random.Random] = None,
) -> List[Tuple[Snippet, VocabEntry]]:
    """
    Shuffle pairs, then stable-sort them richest context first.

    Snippets with both neighbors come first, then those with one, then
    those with none. Order within each group is the shuffle order.
    """
    rng = rng or random.Random()
    ranked = list(pairs)
    rng.shuffle(ranked)
    ranked.sort(key=lambda pair: -context_score(pair[0]))
    return ranked


def sample_tier(
    tier: int,
    lexicon: Lexicon,
    range_index: Dict[int, List[ByteRange]],
    reader: RecordReader,
    sample_size: int = SAMPLE_SIZE,
    rng: Optional[random.Random] = None,
) -> List[Tuple[Snippet, VocabEntry]]:
    """
    Draw the card sample for one tier.

    Every indexed snippet of every entry at the tier is read back from the
    store, ranked with rank_by_context, and the first sample_size are kept.

    Args:
        tier: Tier to sample
        lexicon: Lexicon the index was built against
        range_index: handle -> byte ranges, from the same run as the store
        reader: Reader over that run's record store
        sample_size: Maximum number of pairs returned
        rng: Random source for the shuffle

    Returns:
        Up to sample_size (Snippet, VocabEntry) pairs
    """
    pairs = [
        (reader.read(byte_range), lexicon.entry(handle))
        for handle in lexicon.handles_for_tier(tier)
        for byte_range in range_index.get(handle, [])
    ]
    logger.debug(f"Tier {tier}: {len(pairs):,} candidate snippets")
    return rank_by_context(pairs, rng=rng)[:sample_size]
