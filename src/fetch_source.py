"""
Source resolver: finds Books.json on the first mirror that serves it, then
downloads and normalizes every book it lists.

Candidates are tried base-by-base; within a base every sub-path is tried
before moving on.  Each URL gets up to `tries` attempts with a linear
back-off (backoff * attempt) between them.

Usage:
  python src/fetch_source.py           # resolve the source and load every book
  python src/fetch_source.py --list    # only print the manifest (no book downloads)
"""
from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Corpus, CorpusError, slugify, source_filename
from config import BuildConfig
from normalize import NormalizationError, normalize_book

MANIFEST_FILE = "Books.json"

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (compatible; KJVVersePagesBot/1.0; "
        "+https://kjv.livingwordbibles.com) "
        "Gecko/20100101 Firefox/120.0"
    )
}


class FetchError(RuntimeError):
    """One URL failed on every attempt."""


class ResolutionError(RuntimeError):
    """No candidate base/sub-path served a usable manifest."""


@dataclass(frozen=True)
class SourceLocation:
    base: str
    sub_path: str
    books: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "books", tuple(self.books))

    def url_for(self, filename: str) -> str:
        return self.base + self.sub_path + filename


def make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(HEADERS)
    return session


def _decode(resp: requests.Response):
    ctype = (resp.headers.get("content-type") or "").lower()
    if "application/json" in ctype:
        return resp.json()
    # raw.githubusercontent.com serves JSON as text/plain
    return json.loads(resp.text)


def fetch_json(
    session: requests.Session,
    url: str,
    tries: int = 3,
    backoff: float = 0.25,
    timeout: float = 30,
    sleep=time.sleep,
):
    """GET url and decode JSON, retrying transient failures. Raises FetchError."""
    last = ""
    for attempt in range(1, tries + 1):
        try:
            resp = session.get(url, timeout=timeout)
            resp.raise_for_status()
            return _decode(resp)
        except (requests.RequestException, ValueError) as e:
            last = f"{e} @ {url}"
            if attempt < tries:
                sleep(backoff * attempt)
    raise FetchError(last or f"no attempts made @ {url}")


def _is_manifest(data) -> bool:
    return (
        isinstance(data, list)
        and len(data) > 0
        and all(isinstance(name, str) for name in data)
    )


def locate(session: requests.Session, config: BuildConfig, sleep=time.sleep) -> SourceLocation:
    """Return the first (base, sub_path, books) that serves a valid manifest."""
    last = ""
    for base in config.data_bases:
        for sub in config.sub_paths:
            url = base + sub + MANIFEST_FILE
            try:
                data = fetch_json(
                    session, url,
                    tries=config.fetch_tries,
                    backoff=config.backoff_seconds,
                    timeout=config.request_timeout,
                    sleep=sleep,
                )
            except FetchError as e:
                last = str(e)
                print(f"  [miss] {url}: {e}", file=sys.stderr)
                continue
            if _is_manifest(data):
                return SourceLocation(base=base, sub_path=sub, books=tuple(data))
            last = f"Unexpected {MANIFEST_FILE} @ {url}"
            print(f"  [miss] {last}", file=sys.stderr)
    raise ResolutionError(f"Could not load {MANIFEST_FILE}. {last}".rstrip())


def fetch_book(session: requests.Session, location: SourceLocation, name: str,
               config: BuildConfig, sleep=time.sleep):
    """Raw JSON for one book, from the resolved location."""
    return fetch_json(
        session, location.url_for(source_filename(name)),
        tries=config.fetch_tries,
        backoff=config.backoff_seconds,
        timeout=config.request_timeout,
        sleep=sleep,
    )


def load_corpus(session: requests.Session, config: BuildConfig, sleep=time.sleep) -> Corpus:
    """Resolve the source, then fetch and normalize each book in manifest order."""
    location = locate(session, config, sleep=sleep)
    print(f"Source: {location.base}{location.sub_path} ({len(location.books)} books)")

    books = []
    for i, name in enumerate(location.books, 1):
        raw = fetch_book(session, location, name, config, sleep=sleep)
        book = normalize_book(name, raw)
        n_verses = sum(ch.verse_count for ch in book.chapters)
        print(f"  [{i:2d}/{len(location.books)}] {name}  ({len(book.chapters)} ch, {n_verses} v)")
        books.append(book)
    return Corpus(tuple(books))


def main() -> None:
    ap = argparse.ArgumentParser(description="Resolve and download the KJV source JSON")
    ap.add_argument("--list", action="store_true", help="Print the manifest without downloading books")
    args = ap.parse_args()

    config = BuildConfig.from_env()
    session = make_session()

    try:
        if args.list:
            location = locate(session, config)
            print(f"Source: {location.base}{location.sub_path}")
            print(f"{'Book':<20} {'Slug':<20} {'File'}")
            print("-" * 60)
            for name in location.books:
                print(f"{name:<20} {slugify(name):<20} {source_filename(name)}")
            return
        corpus = load_corpus(session, config)
    except (FetchError, ResolutionError, NormalizationError, CorpusError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    total = sum(1 for _ in corpus.iter_refs())
    print(f"\nLoaded {len(corpus)} books, {total} verses.")


if __name__ == "__main__":
    main()
