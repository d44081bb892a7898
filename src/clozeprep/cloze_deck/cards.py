"""Cloze note model and note construction."""
from __future__ import annotations

from functools import lru_cache

import genanki

from ..cloze_acquire.encoding import Snippet

__all__ = [
    "MODEL_ID",
    "cloze_model",
    "make_cloze",
    "build_note",
]

MODEL_ID = 1122338855

_CARD_HTML = (
    "<div class=context>{{Prefix}}</div> "
    "{{cloze:Sentence}} "
    "<div class=context>{{Suffix}}</div>"
)

_CARD_CSS = """
.card {
  font-family: arial;
  font-size: 24px;
  text-align: center;
  color: black;
  background-color: white;
}

.context {
  font-size: 80%;
  padding: 0.5rem 0;
}

.cloze {
  font-weight: bold;
  color: blue;
}

.nightMode .cloze {color: lightblue;}"""


@lru_cache(maxsize=None)
def cloze_model() -> genanki.Model:
    """The shared cloze note model (built once, never modified)."""
    return genanki.Model(
        MODEL_ID,
        "Cloze (zhlearn)",
        fields=[
            {"name": "Sentence"},
            {"name": "Prefix"},
            {"name": "Suffix"},
        ],
        templates=[
            {
                "name": "Cloze",
                "qfmt": _CARD_HTML,
                "afmt": _CARD_HTML,
            }
        ],
        css=_CARD_CSS,
        model_type=genanki.Model.CLOZE,
    )


def make_cloze(sentence: str, phrase: str) -> str:
    """
    Blank out the first occurrence of phrase as cloze deletion c1.

    Raises:
        ValueError: If phrase does not occur in sentence

    Example:
        >>> make_cloze("我每天都喝咖啡", "咖啡")
        '我每天都喝{{c1::咖啡}}'
    """
    loc = sentence.find(phrase)
    if loc < 0:
        raise ValueError(f"Phrase {phrase!r} not found in sentence {sentence!r}")
    return f"{sentence[:loc]}{{{{c1::{phrase}}}}}{sentence[loc + len(phrase):]}"


def build_note(snippet: Snippet, phrase: str) -> genanki.Note:
    """Build a cloze note for phrase, with the snippet's neighbors as context."""
    return genanki.Note(
        model=cloze_model(),
        fields=[
            make_cloze(snippet.sentence, phrase),
            snippet.prefix or "",
            snippet.suffix or "",
        ],
    )
