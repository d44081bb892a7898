"""
Deck assembly from an indexed corpus.

Main entry point:
    build_decks() - Sample each tier and write one .apkg per tier

Key components:
    - sampler: Shuffled, context-ranked snippet samples per tier
    - cards: Cloze note model and note construction
    - export: Anki package writing
"""

from .cards import build_note, cloze_model, make_cloze
from .export import build_decks, build_tier_deck, deck_path
from .sampler import context_score, rank_by_context, sample_tier

__all__ = [
    "build_decks",
    "build_tier_deck",
    "deck_path",
    "build_note",
    "cloze_model",
    "make_cloze",
    "context_score",
    "rank_by_context",
    "sample_tier",
]
