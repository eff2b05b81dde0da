"""Pytest configuration: put src/ on sys.path so the build modules import
the same way they do when run as scripts."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from bible_data import Book, Chapter, Corpus  # noqa: E402
from config import BuildConfig  # noqa: E402


def make_book(name: str, *chapters: list[str], start: int = 1) -> Book:
    """Book whose chapters (numbered from `start`) hold the given verse texts."""
    return Book(
        name=name,
        chapters=tuple(
            Chapter(n, {str(v): text for v, text in enumerate(verses, 1)})
            for n, verses in enumerate(chapters, start)
        ),
    )


@pytest.fixture
def two_book_corpus() -> Corpus:
    return Corpus((
        make_book("Genesis", ["A", "B"]),
        make_book("Exodus", ["C"]),
    ))


@pytest.fixture
def config(tmp_path) -> BuildConfig:
    return BuildConfig(out_dir=tmp_path / "dist", site_base_url="https://example.org/")
