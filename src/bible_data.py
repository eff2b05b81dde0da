"""
Canonical in-memory model of the scripture corpus.

Shapes:
  Chapter   - number plus verse-number -> text mapping
  Book      - display name plus chapters, stored in ascending chapter order
  VerseRef  - (book slug, chapter, verse) locator used by navigation
  Corpus    - books in manifest order, indexed by slug

Order is always explicit: chapters are a tuple sorted by number and books a
tuple in the order the source manifest listed them.  Nothing is inferred from
dict iteration order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Mapping

_NON_SLUG_RE = re.compile(r"[^a-z0-9\s-]")
_SPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-{2,}")
_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")

SOURCE_EXT = ".json"


class CorpusError(ValueError):
    """Raised for slug collisions and references to books not in the corpus."""


def slugify(name: str) -> str:
    """
    URL-safe slug: lowercase, only [a-z0-9-].

        slugify("Song of Solomon") -> "song-of-solomon"
        slugify("1 John")          -> "1-john"

    Idempotent: slugify(slugify(x)) == slugify(x).
    """
    s = str(name).strip().lower()
    s = _NON_SLUG_RE.sub("", s)
    s = _SPACE_RE.sub("-", s)
    s = _DASHES_RE.sub("-", s)
    return s.strip("-")


def source_filename(name: str) -> str:
    """Song of Solomon -> SongofSolomon.json"""
    return _NON_ALNUM_RE.sub("", str(name)) + SOURCE_EXT


@dataclass(frozen=True)
class Chapter:
    number: int
    verses: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "verses", MappingProxyType(dict(self.verses)))

    @property
    def verse_count(self) -> int:
        return len(self.verses)

    def text(self, verse: int) -> str | None:
        return self.verses.get(str(verse))


@dataclass(frozen=True)
class Book:
    name: str
    chapters: tuple[Chapter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "chapters", tuple(self.chapters))

    @cached_property
    def slug(self) -> str:
        return slugify(self.name)

    @cached_property
    def _by_number(self) -> dict[int, Chapter]:
        return {ch.number: ch for ch in self.chapters}

    @property
    def chapter_numbers(self) -> list[int]:
        return [ch.number for ch in self.chapters]

    def chapter(self, number: int) -> Chapter | None:
        return self._by_number.get(number)

    def verse_count(self, chapter: int) -> int:
        ch = self.chapter(chapter)
        return ch.verse_count if ch else 0

    def readable_chapters(self) -> list[Chapter]:
        """Chapters with at least one verse, ascending."""
        return [ch for ch in self.chapters if ch.verse_count > 0]

    def iter_refs(self):
        for ch in self.readable_chapters():
            for v in range(1, ch.verse_count + 1):
                yield VerseRef(self.slug, ch.number, v)


@dataclass(frozen=True)
class VerseRef:
    book_slug: str
    chapter: int
    verse: int

    def __str__(self) -> str:
        return f"{self.book_slug} {self.chapter}:{self.verse}"


@dataclass(frozen=True)
class Corpus:
    books: tuple[Book, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "books", tuple(self.books))
        seen: dict[str, str] = {}
        for book in self.books:
            if not book.slug:
                raise CorpusError(f"Book {book.name!r} has an empty slug")
            other = seen.get(book.slug)
            if other is not None:
                raise CorpusError(
                    f"Slug collision: {other!r} and {book.name!r} both map to {book.slug!r}"
                )
            seen[book.slug] = book.name

    @cached_property
    def _index(self) -> dict[str, int]:
        return {book.slug: i for i, book in enumerate(self.books)}

    def position(self, slug: str) -> int:
        try:
            return self._index[slug]
        except KeyError:
            raise CorpusError(f"Unknown book slug: {slug!r}") from None

    def book(self, slug: str) -> Book:
        return self.books[self.position(slug)]

    def first_ref(self) -> VerseRef | None:
        """First verse of the first book that has one, in corpus order."""
        for book in self.books:
            readable = book.readable_chapters()
            if readable:
                return VerseRef(book.slug, readable[0].number, 1)
        return None

    def iter_refs(self):
        """Every verse reference in reading order."""
        for book in self.books:
            yield from book.iter_refs()

    def __len__(self) -> int:
        return len(self.books)


if __name__ == "__main__":
    assert slugify("Song of Solomon") == "song-of-solomon"
    assert slugify(slugify("Song of Solomon")) == "song-of-solomon"
    assert slugify("1 John") == "1-john"
    assert source_filename("Song of Solomon") == "SongofSolomon.json"
    print("All assertions passed.")
