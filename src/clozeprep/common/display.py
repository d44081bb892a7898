"""Console display helpers for the cloze pipeline."""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from tqdm import tqdm

__all__ = [
    "LINE_WIDTH",
    "truncate_path_to_fit",
    "progress",
    "print_acquisition_header",
    "print_tier_summary",
    "print_completion_banner",
]

LINE_WIDTH = 100


def truncate_path_to_fit(path, prefix: str, width: int = LINE_WIDTH) -> str:
    """
    Shorten a path so that prefix + path fits in width characters.

    The tail of the path is kept, the head is replaced by "...".

    Example:
        >>> truncate_path_to_fit("/a/very/long/path/file.db", "DB: ", 16)
        '...h/file.db'
    """
    text = str(path)
    room = width - len(prefix)
    if len(text) <= room:
        return text
    if room <= 3:
        return text[-room:] if room > 0 else ""
    return "..." + text[-(room - 3):]


def progress(iterable: Iterable, total: Optional[int] = None, desc: str = "", unit: str = " items"):
    """Wrap an iterable in the pipeline's standard tqdm progress bar."""
    return tqdm(iterable, total=total, desc=desc, unit=unit)


def print_acquisition_header(
        start_time,
        lexicon_path,
        corpus_name,
        corpus_paths,
        store_path,
        deck_dir,
        vocab_size,
):
    """
    Print the run configuration header.

    Args:
        start_time (datetime): Start time of the run.
        lexicon_path (str): Lexicon CSV path.
        corpus_name (str): Corpus name.
        corpus_paths (list): Corpus files.
        store_path (str): Record store path.
        deck_dir (str): Deck output directory.
        vocab_size (int): Number of loaded vocabulary entries.
    """
    lexicon_str = truncate_path_to_fit(lexicon_path, "Lexicon:              ", LINE_WIDTH)
    store_str = truncate_path_to_fit(store_path, "Record store:         ", LINE_WIDTH)
    deck_str = truncate_path_to_fit(deck_dir, "Deck directory:       ", LINE_WIDTH)

    lines = [
        "CLOZE CARD ACQUISITION",
        "━" * LINE_WIDTH,
        f"Start Time: {start_time:%Y-%m-%d %H:%M:%S}",
        "",
        "Configuration",
        "═" * LINE_WIDTH,
        f"Lexicon:              {lexicon_str}",
        f"Vocabulary entries:   {vocab_size:,}",
        f"Corpus:               {corpus_name}",
        f"Corpus files:         {len(corpus_paths)}",
        f"Record store:         {store_str}",
        f"Deck directory:       {deck_str}",
        "",
    ]
    print("\n".join(lines), flush=True)


def print_tier_summary(tier_counts: Dict[int, int], stats=None):
    """
    Print indexed sentence counts per tier.

    Args:
        tier_counts (dict): tier -> number of indexed ranges.
        stats (IndexStats, optional): Counters from the indexing pass.
    """
    lines = [
        "",
        "Index Summary",
        "═" * LINE_WIDTH,
    ]
    if stats is not None:
        lines.extend([
            f"Records read:         {stats.records_read:,}",
            f"Low-score records:    {stats.records_skipped_score:,}",
            f"Sentences seen:       {stats.sentences_seen:,}",
            f"Sentences rejected:   {stats.sentences_rejected:,}",
            f"Sentences too short:  {stats.sentences_too_short:,}",
            f"Snippets written:     {stats.snippets_written:,}",
            "",
        ])
    lines.append("Ranges per tier")
    lines.append("─" * LINE_WIDTH)
    for tier, count in sorted(tier_counts.items()):
        lines.append(f"HSK {tier}:                {count:,}")
    lines.append("")
    print("\n".join(lines), flush=True)


def print_completion_banner(deck_dir, deck_counts: Dict[int, int], runtime):
    """
    Print completion banner with deck statistics.

    Args:
        deck_dir (str): Deck output directory.
        deck_counts (dict): tier -> number of cards written.
        runtime (timedelta): Total runtime.
    """
    deck_str = truncate_path_to_fit(deck_dir, "Deck directory:       ", LINE_WIDTH)

    lines = [
        "",
        "Acquisition Complete",
        "═" * LINE_WIDTH,
        f"Decks written:        {len(deck_counts)}",
        f"Cards written:        {sum(deck_counts.values()):,}",
        f"Deck directory:       {deck_str}",
        f"Total runtime:        {runtime}",
        "━" * LINE_WIDTH,
        "",
    ]
    print("\n".join(lines), flush=True)
