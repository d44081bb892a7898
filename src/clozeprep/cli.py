"""Command-line entry point: index a corpus and export cloze decks.

Usage:
    clozeprep --lexicon hsk30.csv --corpus-dir corpus --deck-dir decks [--store phrases.db]
"""
from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from .cloze_acquire.config import (
    MAX_RECORDS_PER_SOURCE,
    SAMPLE_SIZE,
    AcquisitionConfig,
    CorpusConfig,
    DeckConfig,
    build_corpus_config,
    build_store_path,
)
from .cloze_acquire.core import build_range_index, tier_range_counts
from .cloze_acquire.lexicon import load_lexicon
from .cloze_deck.export import build_decks
from .common.display import (
    print_acquisition_header,
    print_completion_banner,
    print_tier_summary,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="clozeprep",
        description="Build per-tier cloze decks from a JSON-lines corpus",
    )
    p.add_argument("--lexicon", required=True, help="Lexicon CSV (Simplified, Level columns)")
    corpus = p.add_mutually_exclusive_group(required=True)
    corpus.add_argument("--corpus", nargs="+", help="Corpus JSON-lines files")
    corpus.add_argument("--corpus-dir", help="Directory of part-*.jsonl corpus files")
    p.add_argument("--store", default=None,
                   help="Record store file to create (default: <deck-dir>/<corpus name>/snippets.db)")
    p.add_argument("--deck-dir", required=True, help="Output directory for .apkg decks")
    p.add_argument("--text-column", default="Simplified", help="Lexicon vocabulary column")
    p.add_argument("--tier-column", default="Level", help="Lexicon tier label column")
    p.add_argument("--max-records", type=int, default=MAX_RECORDS_PER_SOURCE,
                   help="Maximum lines read per corpus file")
    p.add_argument("--sample-size", type=int, default=SAMPLE_SIZE, help="Maximum cards per deck")
    p.add_argument("--seed", type=int, default=None, help="Seed for the card sampling shuffle")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return p


def _corpus_config(args: argparse.Namespace) -> CorpusConfig:
    if args.corpus_dir:
        return build_corpus_config(args.corpus_dir, max_records=args.max_records)
    paths = [Path(p) for p in args.corpus]
    return CorpusConfig(name=paths[0].resolve().parent.name, paths=paths, max_records=args.max_records)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    start_time = datetime.now()
    lexicon = load_lexicon(args.lexicon, text_column=args.text_column, tier_column=args.tier_column)
    corpus = _corpus_config(args)
    store_path = Path(args.store) if args.store else build_store_path(args.deck_dir, corpus.name)
    deck_cfg = DeckConfig(deck_dir=Path(args.deck_dir), sample_size=args.sample_size, seed=args.seed)

    print_acquisition_header(
        start_time=start_time,
        lexicon_path=args.lexicon,
        corpus_name=corpus.name,
        corpus_paths=corpus.paths,
        store_path=store_path,
        deck_dir=deck_cfg.deck_dir,
        vocab_size=len(lexicon),
    )

    result = build_range_index(
        lexicon,
        corpus.paths,
        store_path,
        config=AcquisitionConfig(max_records=corpus.max_records),
    )
    print_tier_summary(tier_range_counts(lexicon, result.range_index), result.stats)

    deck_counts = build_decks(
        lexicon,
        result.range_index,
        result.store_path,
        deck_cfg.deck_dir,
        sample_size=deck_cfg.sample_size,
        seed=deck_cfg.seed,
        tiers=deck_cfg.tiers,
    )

    print_completion_banner(deck_cfg.deck_dir, deck_counts, datetime.now() - start_time)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
