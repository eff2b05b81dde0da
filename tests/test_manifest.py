"""Tests for the derived book order / counts lookups."""
from __future__ import annotations

import json

from bible_data import Book, Chapter, Corpus
from conftest import make_book
from manifest import build_books_index, build_counts, build_order


def test_order_and_index_follow_corpus(two_book_corpus):
    assert build_order(two_book_corpus) == ["genesis", "exodus"]
    assert build_books_index(two_book_corpus) == [
        {"slug": "genesis", "name": "Genesis"},
        {"slug": "exodus", "name": "Exodus"},
    ]


def test_counts_match_books():
    corpus = Corpus((
        make_book("Song of Solomon", ["a", "b", "c"], ["d"]),
        Book("Jude", (Chapter(1, {}),)),
    ))
    counts = build_counts(corpus)
    assert counts == {"song-of-solomon": {"1": 3, "2": 1}, "jude": {"1": 0}}
    for book in corpus.books:
        for ch in book.chapters:
            assert counts[book.slug][str(ch.number)] == book.verse_count(ch.number)


def test_counts_are_json_ready(two_book_corpus):
    counts = build_counts(two_book_corpus)
    assert json.loads(json.dumps(counts)) == counts
