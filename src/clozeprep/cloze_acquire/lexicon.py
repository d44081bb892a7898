"""
Vocabulary lexicon loading and per-tier lookup.

Entries are deduplicated by (text, tier) and numbered in first-seen order.
That number is the entry's handle: it keys classification results and the
range index, and it is stable for the whole run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .config import AGGREGATE_TIER, AGGREGATE_TIER_LABEL, TIERS

logger = logging.getLogger(__name__)

__all__ = [
    "VocabEntry",
    "Lexicon",
    "parse_tier_label",
    "build_lexicon",
    "load_lexicon",
]

_NUMERIC_TIER_LABELS = {str(tier): tier for tier in TIERS if tier != AGGREGATE_TIER}


@dataclass(frozen=True)
class VocabEntry:
    """A vocabulary item and its proficiency tier (1-7)."""
    text: str
    tier: int


@dataclass
class Lexicon:
    """
    Deduplicated vocabulary entries plus a text lookup for each tier.

    Attributes:
        entries: Entries indexed by handle
        tiers: tier -> {text -> handle}, one mapping per tier in TIERS
    """
    entries: List[VocabEntry] = field(default_factory=list)
    tiers: Dict[int, Dict[str, int]] = field(
        default_factory=lambda: {tier: {} for tier in TIERS}
    )

    def __len__(self) -> int:
        return len(self.entries)

    def entry(self, handle: int) -> VocabEntry:
        return self.entries[handle]

    def lookup(self, text: str, tier: int) -> Optional[int]:
        """Handle of `text` at exactly `tier`, or None."""
        return self.tiers[tier].get(text)

    def handles_for_tier(self, tier: int) -> List[int]:
        """Handles of every entry at `tier`, in handle order."""
        return [
            handle
            for handle, entry in enumerate(self.entries)
            if entry.tier == tier
        ]


def _is_missing(cell) -> bool:
    return pd.isna(cell) or not str(cell).strip()


def parse_tier_label(label: str) -> int:
    """
    Normalize a source tier label.

    Args:
        label: "1" through "6", or "7-9" for the aggregate top tier

    Returns:
        Tier number

    Raises:
        ValueError: For any other label

    Example:
        >>> parse_tier_label("3")
        3
        >>> parse_tier_label("7-9")
        7
    """
    if label == AGGREGATE_TIER_LABEL:
        return AGGREGATE_TIER
    try:
        return _NUMERIC_TIER_LABELS[label]
    except (KeyError, TypeError):
        raise ValueError(f"Unrecognized tier label: {label!r}") from None


def build_lexicon(pairs: Iterable[Tuple[str, int]]) -> Lexicon:
    """
    Build a lexicon from (text, tier) pairs.

    Duplicate pairs keep the handle of their first occurrence. The same
    text may appear at several tiers; each becomes its own entry.

    Example:
        >>> lex = build_lexicon([("你好", 1), ("世界", 3), ("你好", 1)])
        >>> len(lex)
        2
        >>> lex.lookup("世界", 3)
        1
    """
    lexicon = Lexicon()
    for text, tier in pairs:
        if tier not in lexicon.tiers:
            raise ValueError(f"Tier out of range: {tier}")
        if text in lexicon.tiers[tier]:
            continue
        lexicon.tiers[tier][text] = len(lexicon.entries)
        lexicon.entries.append(VocabEntry(text=text, tier=tier))
    return lexicon


def load_lexicon(
    source: str | Path,
    text_column: str = "Simplified",
    tier_column: str = "Level",
) -> Lexicon:
    """
    Load a lexicon from a CSV table.

    The whole table must parse: a malformed row or an unknown tier label
    fails the load, nothing is kept.

    Args:
        source: CSV file with a header row
        text_column: Column holding the vocabulary text
        tier_column: Column holding the tier label

    Returns:
        Loaded Lexicon

    Raises:
        ValueError: On a missing column, malformed row or bad tier label
    """
    source = Path(source)
    logger.info(f"Loading lexicon from {source}")

    # header=None: the header line fixes the field count, so a longer row is
    # a ParserError instead of an implicit index column
    try:
        table = pd.read_csv(source, header=None, dtype=str, keep_default_na=False)
    except pd.errors.ParserError as e:
        raise ValueError(f"Malformed lexicon table {source}: {e}") from e

    header = list(table.iloc[0])
    missing = [c for c in (text_column, tier_column) if c not in header]
    if missing:
        raise ValueError(f"Lexicon {source} is missing column(s): {', '.join(missing)}")
    rows = table.iloc[1:]

    pairs = []
    # Row 1 is the header
    for row_num, (text, label) in enumerate(
        zip(rows[header.index(text_column)], rows[header.index(tier_column)]), start=2
    ):
        if _is_missing(text) or _is_missing(label):
            raise ValueError(f"Malformed lexicon row {row_num} in {source}: missing field")
        try:
            tier = parse_tier_label(label)
        except ValueError as e:
            raise ValueError(f"Bad lexicon row {row_num} in {source}: {e}") from e
        pairs.append((text, tier))

    lexicon = build_lexicon(pairs)
    logger.info(f"Loaded {len(lexicon):,} vocabulary entries from {len(pairs):,} rows")
    return lexicon
