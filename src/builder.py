"""
Site builder: loads the KJV source and writes the verse-per-page static site.

Outputs (under OUT_DIR, default dist/):
  index.html                          — redirect to the first verse
  {book-slug}/index.html              — book index
  {book-slug}/{ch}/index.html         — chapter index (verse list)
  {book-slug}/{ch}/{v}/index.html     — one page per verse
  sitemap.xml [+ sitemap-N.xml]       — verse URLs, chunked at 50,000
  robots.txt, CNAME

Usage:
  python src/builder.py                              # full build into dist/
  python src/builder.py --out-dir /tmp/site          # build elsewhere
  python src/builder.py --site-base-url https://example.org --no-clean
"""
from __future__ import annotations

import argparse
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Corpus, CorpusError
from config import BuildConfig, add_arguments, from_args
from fetch_source import FetchError, ResolutionError, load_corpus, make_session
from manifest import build_books_index, build_counts
from navigation import next_ref, previous_ref
from normalize import NormalizationError
from pages import (
    canonical_url,
    render_book_index,
    render_chapter_index,
    render_redirect,
    render_verse_page,
)
from sitemap import build_sitemaps, render_robots

INDEX_FILE = "index.html"


class ArtifactWriteError(RuntimeError):
    """An output file could not be written."""


@dataclass(frozen=True)
class Artifact:
    path: str      # POSIX path relative to the output root
    content: str
    kind: str = "site"   # verse | chapter | book | site


def _dir_index(*parts) -> str:
    return "/".join(str(p) for p in parts) + "/" + INDEX_FILE


def iter_verse_urls(corpus: Corpus, config: BuildConfig) -> Iterator[str]:
    """Canonical URL of every verse, in reading order."""
    for ref in corpus.iter_refs():
        yield canonical_url(config.site_base_url, ref.book_slug, ref.chapter, ref.verse)


def iter_pages(corpus: Corpus, config: BuildConfig) -> Iterator[Artifact]:
    """Book index, chapter index and verse pages, generated lazily."""
    books_index = build_books_index(corpus)
    counts = build_counts(corpus)

    for book in corpus.books:
        readable = book.readable_chapters()
        first = readable[0].number if readable else None
        yield Artifact(_dir_index(book.slug), render_book_index(config, book, first), "book")

        for ch in book.chapters:
            yield Artifact(
                _dir_index(book.slug, ch.number),
                render_chapter_index(config, book, ch.number, ch.verse_count),
                "chapter",
            )

        for ref in book.iter_refs():
            ch = book.chapter(ref.chapter)
            html = render_verse_page(
                config,
                book,
                ref.chapter,
                ref.verse,
                ch.text(ref.verse),
                previous_ref(corpus, ref),
                next_ref(corpus, ref),
                books_index,
                counts,
            )
            yield Artifact(_dir_index(book.slug, ref.chapter, ref.verse), html, "verse")


def build_site_files(corpus: Corpus, config: BuildConfig) -> list[Artifact]:
    """Root redirect, robots.txt, sitemaps and CNAME."""
    first = corpus.first_ref()
    if first is None:
        raise CorpusError("Corpus contains no verses")
    first_url = canonical_url(config.site_base_url, first.book_slug, first.chapter, first.verse)

    urls = list(iter_verse_urls(corpus, config))
    artifacts = [
        Artifact(INDEX_FILE, render_redirect(first_url)),
        Artifact("robots.txt", render_robots(config.site_base_url)),
    ]
    for name, xml in build_sitemaps(urls, config.site_base_url, config.sitemap_chunk).items():
        artifacts.append(Artifact(name, xml))
    artifacts.append(Artifact("CNAME", config.cname + "\n"))
    return artifacts


def build_all(corpus: Corpus, config: BuildConfig) -> tuple[Iterator[Artifact], list[Artifact]]:
    """(lazy per-page artifacts, site-level artifacts)."""
    return iter_pages(corpus, config), build_site_files(corpus, config)


def write_artifacts(out_dir: Path, artifacts) -> dict[str, int]:
    """Write every artifact under out_dir. Returns counts per artifact kind."""
    root = out_dir.resolve()
    written: dict[str, int] = {}
    for art in artifacts:
        dest = (root / art.path).resolve()
        if Path(art.path).is_absolute() or not dest.is_relative_to(root):
            raise ArtifactWriteError(f"{art.path!r} is outside {root}")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(art.content, encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(f"{dest}: {e}") from e
        written[art.kind] = written.get(art.kind, 0) + 1
    return written


def prepare_out_dir(config: BuildConfig) -> None:
    try:
        if config.clean and config.out_dir.exists():
            shutil.rmtree(config.out_dir)
            print(f"Removed {config.out_dir}")
        config.out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactWriteError(f"{config.out_dir}: {e}") from e


def build(corpus: Corpus, config: BuildConfig) -> int:
    """Write the whole site for corpus. Returns the number of verse pages."""
    pages, site_files = build_all(corpus, config)
    counts = write_artifacts(config.out_dir, pages)
    print(
        f"  {counts.get('book', 0)} book pages, {counts.get('chapter', 0)} chapter pages, "
        f"{counts.get('verse', 0)} verse pages"
    )
    site_counts = write_artifacts(config.out_dir, site_files)
    print(f"  {site_counts.get('site', 0)} site files ({', '.join(a.path for a in site_files)})")
    return counts.get("verse", 0)


# Stage label shown in the failure line, by exception type
STAGES = (
    (ResolutionError, "resolve"),
    (FetchError, "fetch"),
    (NormalizationError, "normalize"),
    (CorpusError, "corpus"),
    (ArtifactWriteError, "write"),
)


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Build the KJV verse-per-page static site")
    add_arguments(ap)
    args = ap.parse_args(argv)
    config = from_args(args)

    try:
        prepare_out_dir(config)
        corpus = load_corpus(make_session(), config)
        pages = build(corpus, config)
    except tuple(exc for exc, _ in STAGES) as e:
        stage = next(name for exc, name in STAGES if isinstance(e, exc))
        print(f"Build failed: {stage}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Build complete. Pages: {pages}. Output: {config.out_dir}")


if __name__ == "__main__":
    main()
