"""
Previous/next verse resolution across chapter and book boundaries.

Both functions are pure lookups on a Corpus.  Chapters are walked in their
stored ascending order and books in corpus (manifest) order.  Chapters with
no verses are stepped over, so a verse-0 reference is never produced.
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Book, Corpus, CorpusError, VerseRef


def _readable_numbers(book: Book) -> list[int]:
    return [ch.number for ch in book.readable_chapters()]


def _chapter_index(book: Book, ref: VerseRef) -> tuple[list[int], int]:
    numbers = _readable_numbers(book)
    try:
        return numbers, numbers.index(ref.chapter)
    except ValueError:
        raise CorpusError(f"No chapter {ref.chapter} with verses in {book.name}") from None


def next_ref(corpus: Corpus, ref: VerseRef) -> VerseRef | None:
    """The verse after ref, or None at the end of the corpus."""
    pos = corpus.position(ref.book_slug)
    book = corpus.books[pos]
    numbers, i = _chapter_index(book, ref)

    if ref.verse < book.verse_count(ref.chapter):
        return VerseRef(book.slug, ref.chapter, ref.verse + 1)
    if i < len(numbers) - 1:
        return VerseRef(book.slug, numbers[i + 1], 1)
    for nxt in corpus.books[pos + 1:]:
        nums = _readable_numbers(nxt)
        if nums:
            return VerseRef(nxt.slug, nums[0], 1)
    return None


def previous_ref(corpus: Corpus, ref: VerseRef) -> VerseRef | None:
    """The verse before ref, or None at the start of the corpus."""
    pos = corpus.position(ref.book_slug)
    book = corpus.books[pos]
    numbers, i = _chapter_index(book, ref)

    if ref.verse > 1:
        return VerseRef(book.slug, ref.chapter, ref.verse - 1)
    if i > 0:
        prev_ch = numbers[i - 1]
        return VerseRef(book.slug, prev_ch, book.verse_count(prev_ch))
    for prv in reversed(corpus.books[:pos]):
        nums = _readable_numbers(prv)
        if nums:
            return VerseRef(prv.slug, nums[-1], prv.verse_count(nums[-1]))
    return None
