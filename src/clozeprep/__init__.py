"""
Corpus-driven cloze flashcard toolkit.

This package builds language-learning cloze decks from a large raw corpus
by finding sentences in which a vocabulary entry is the hardest word.

Main components:
    - cloze_acquire: Index the corpus against a tiered vocabulary lexicon
    - cloze_deck: Sample indexed snippets and export Anki decks
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
