"""
Lookup structures derived from a loaded Corpus.

  build_order(corpus)        -> ["genesis", "exodus", ...]
  build_books_index(corpus)  -> [{"slug": "genesis", "name": "Genesis"}, ...]
  build_counts(corpus)       -> {"genesis": {"1": 31, "2": 25, ...}, ...}

The books index and counts are embedded in every verse page for the
book/chapter/verse dropdowns, so keys are strings and everything is
JSON-serializable as-is.
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Corpus


def build_order(corpus: Corpus) -> list[str]:
    return [book.slug for book in corpus.books]


def build_books_index(corpus: Corpus) -> list[dict]:
    return [{"slug": book.slug, "name": book.name} for book in corpus.books]


def build_counts(corpus: Corpus) -> dict[str, dict[str, int]]:
    """book slug -> {chapter number as str -> verse count}, chapters ascending."""
    counts: dict[str, dict[str, int]] = {}
    for book in corpus.books:
        counts[book.slug] = {str(ch.number): ch.verse_count for ch in book.chapters}
    return counts
