"""Anki package export, one deck per tier."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import genanki

from ..cloze_acquire.config import SAMPLE_SIZE, TIERS
from ..cloze_acquire.encoding import ByteRange
from ..cloze_acquire.lexicon import Lexicon
from ..cloze_acquire.store import RecordReader
from ..common.display import progress
from .cards import build_note
from .sampler import sample_tier

logger = logging.getLogger(__name__)

__all__ = [
    "DECK_ID_BASE",
    "deck_path",
    "build_tier_deck",
    "build_decks",
]

DECK_ID_BASE = 881199
DECK_DESCRIPTION = "Corpus-generated Chinese Cloze cards"


def deck_path(deck_dir: str | Path, tier: int) -> Path:
    """
    Output path of a tier's package.

    Example:
        >>> deck_path("decks", 3)
        PosixPath('decks/hsk-3.apkg')
    """
    return Path(deck_dir) / f"hsk-{tier}.apkg"


def build_tier_deck(
    tier: int,
    lexicon: Lexicon,
    range_index: Dict[int, List[ByteRange]],
    reader: RecordReader,
    sample_size: int = SAMPLE_SIZE,
    rng: Optional[random.Random] = None,
) -> genanki.Deck:
    """Build the cloze deck for one tier from its snippet sample."""
    deck = genanki.Deck(
        DECK_ID_BASE + tier,
        f"HSK Level {tier}",
        DECK_DESCRIPTION,
    )
    sample = sample_tier(tier, lexicon, range_index, reader, sample_size=sample_size, rng=rng)
    for snippet, entry in sample:
        deck.add_note(build_note(snippet, entry.text))
    return deck


def build_decks(
    lexicon: Lexicon,
    range_index: Dict[int, List[ByteRange]],
    store_path: str | Path,
    deck_dir: str | Path,
    sample_size: int = SAMPLE_SIZE,
    seed: Optional[int] = None,
    tiers: Iterable[int] = TIERS,
) -> Dict[int, int]:
    """
    Write one .apkg package per tier.

    Reads snippets back from the record store written by the indexing pass.
    The store and range_index must come from the same run.

    Args:
        lexicon: Lexicon the index was built against
        range_index: handle -> byte ranges
        store_path: Record store file
        deck_dir: Output directory for hsk-<tier>.apkg files
        sample_size: Maximum cards per deck
        seed: Seed for the sampling shuffle
        tiers: Tiers to export

    Returns:
        tier -> number of cards written
    """
    deck_dir = Path(deck_dir)
    deck_dir.mkdir(parents=True, exist_ok=True)
    tiers = list(tiers)
    rng = random.Random(seed)

    logger.info(f"Building {len(tiers)} decks into {deck_dir}")
    counts: Dict[int, int] = {}
    with RecordReader(store_path) as reader:
        for tier in progress(tiers, desc="Building decks", unit=" decks"):
            deck = build_tier_deck(
                tier, lexicon, range_index, reader, sample_size=sample_size, rng=rng
            )
            out_path = deck_path(deck_dir, tier)
            genanki.Package(deck).write_to_file(str(out_path))
            counts[tier] = len(deck.notes)
            logger.info(f"Wrote {counts[tier]} cards to {out_path.name}")

    return counts
