"""Sentence splitting, word segmentation and tier classification."""
from __future__ import annotations

import html
import re
from typing import Callable, List, Optional, Sequence

import regex

from .config import TIERS
from .lexicon import Lexicon

__all__ = [
    "SENTENCE_BOUNDARY",
    "split_sentences",
    "escape_text",
    "grapheme_length",
    "WordSegmenter",
    "classify_tokens",
    "classify",
]

# One or more sentence-final marks
SENTENCE_BOUNDARY = re.compile(r"[。！？]+")

_GRAPHEME = regex.compile(r"\X")

Segmenter = Callable[[str], Sequence[str]]


def split_sentences(text: str) -> List[str]:
    """
    Split text into sentences on runs of sentence-final punctuation.

    Empty fragments between delimiters are dropped before trimming, so a
    whitespace-only fragment survives as an empty sentence.

    Args:
        text: Raw text

    Returns:
        Sentences in source order, punctuation removed

    Example:
        >>> split_sentences("我喜欢猫。它很可爱！")
        ['我喜欢猫', '它很可爱']
        >>> split_sentences("A。。B")
        ['A', 'B']
    """
    return [s.strip() for s in SENTENCE_BOUNDARY.split(text) if s]


def escape_text(text: str) -> str:
    """
    Escape markup-significant characters for embedding in card HTML.

    Example:
        >>> escape_text("<b>a/b</b>")
        '&lt;b&gt;a&#x2F;b&lt;&#x2F;b&gt;'
    """
    return html.escape(text, quote=True).replace("/", "&#x2F;")


def grapheme_length(text: str) -> int:
    """
    Count user-perceived characters (extended grapheme clusters).

    Example:
        >>> grapheme_length("e\\u0301猫")
        2
    """
    return len(_GRAPHEME.findall(text))


class WordSegmenter:
    """
    Dictionary-based Chinese word segmentation backed by jieba.

    Uses exact mode with the HMM disabled, so only dictionary words (and
    single characters) come out. The dictionary loads on the first cut.
    """

    def __init__(self, dictionary: Optional[str] = None):
        """
        Args:
            dictionary: Path to a jieba dictionary (default: jieba's bundled one)
        """
        self.dictionary = dictionary
        self._tokenizer = None

    @property
    def tokenizer(self):
        if self._tokenizer is None:
            import jieba

            self._tokenizer = jieba.Tokenizer(dictionary=self.dictionary)
        return self._tokenizer

    def cut(self, sentence: str) -> List[str]:
        return self.tokenizer.lcut(sentence, cut_all=False, HMM=False)

    __call__ = cut


def classify_tokens(tokens: Sequence[str], lexicon: Lexicon) -> Optional[List[int]]:
    """
    Classify a tokenized sentence against the lexicon.

    Each token takes the highest tier whose lookup contains it. If any token
    is found at no tier, the whole sentence is rejected. Otherwise the
    sentence tier is the highest token tier, and only the tokens at that
    tier are credited.

    Args:
        tokens: Words of one sentence
        lexicon: Loaded lexicon

    Returns:
        Handles of the top-tier tokens in token order (repeats kept), or
        None if the sentence is rejected or has no tokens

    Example:
        >>> lex = build_lexicon([("你好", 1), ("世界", 3)])
        >>> classify_tokens(["你好", "世界"], lex)
        [1]
        >>> classify_tokens(["你好", "火星"], lex) is None
        True
    """
    matches = []
    for token in tokens:
        for tier in reversed(TIERS):
            handle = lexicon.tiers[tier].get(token)
            if handle is not None:
                matches.append((tier, handle))
                break
        else:
            return None

    if not matches:
        return None

    top_tier = max(tier for tier, _ in matches)
    return [handle for tier, handle in matches if tier == top_tier]


def classify(
    sentence: str,
    lexicon: Lexicon,
    segmenter: Segmenter,
) -> Optional[List[int]]:
    """Segment a sentence into words and classify it (see classify_tokens)."""
    return classify_tokens(segmenter(sentence), lexicon)
