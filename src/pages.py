"""
HTML rendering for verse pages, book/chapter index pages and the root redirect.

Templates live in src/templates/ and are rendered with Jinja2 (autoescaping
on), so verse text and book names never need manual escaping here.
"""
from __future__ import annotations

import re
import sys
from datetime import date
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Book, VerseRef
from config import BuildConfig

TEMPLATES_DIR = Path(__file__).parent / "templates"

MISSING_VERSE_TEXT = "(Verse not found.)"
DESCRIPTION_CHARS = 160
SHARE_TEXT_CHARS = 250

BRAND_NAME = "Living Word Bibles"
BRAND_LINK = "https://www.livingwordbibles.com/read-the-bible-online/kjv"
INSTAGRAM_LINK = "https://www.instagram.com/living.word.bibles/"
FOOT_BADGE = "KJV Bible (Verse-per-Page) v2.1"

_WS_RE = re.compile(r"\s+")

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def canonical_url(site_base_url: str, slug: str, chapter: int | None = None,
                  verse: int | None = None) -> str:
    """{base}/{slug}/ , {base}/{slug}/{ch}/ or {base}/{slug}/{ch}/{v}/"""
    parts = [site_base_url, slug]
    if chapter is not None:
        parts.append(str(chapter))
        if verse is not None:
            parts.append(str(verse))
    return "/".join(parts) + "/"


def ref_url(site_base_url: str, ref: VerseRef | None) -> str | None:
    if ref is None:
        return None
    return canonical_url(site_base_url, ref.book_slug, ref.chapter, ref.verse)


def _squash(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def share_links(url: str, ref_label: str, verse_text: str) -> dict[str, str]:
    text = quote(_squash(f"The Holy Bible — {ref_label}: {verse_text}")[:SHARE_TEXT_CHARS], safe="")
    title = quote(f"The Holy Bible — {ref_label}", safe="")
    enc_url = quote(url, safe="")
    return {
        "fb": f"https://www.facebook.com/sharer/sharer.php?u={enc_url}",
        "x": f"https://twitter.com/intent/tweet?url={enc_url}&text={text}",
        "ln": f"https://www.linkedin.com/sharing/share-offsite/?url={enc_url}",
        "email": f"mailto:?subject={title}&body={text}%0A%0A{enc_url}",
    }


def breadcrumb_ld(site_base_url: str, book: Book, chapter: int, verse: int) -> dict:
    """schema.org BreadcrumbList: Home > KJV > book > chapter > verse."""
    trail = [
        ("Home", site_base_url + "/"),
        ("KJV", site_base_url + "/"),
        (book.name, canonical_url(site_base_url, book.slug)),
        (f"{book.name} {chapter}", canonical_url(site_base_url, book.slug, chapter)),
        (f"{book.name} {chapter}:{verse}", canonical_url(site_base_url, book.slug, chapter, verse)),
    ]
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": name, "item": item}
            for i, (name, item) in enumerate(trail, 1)
        ],
    }


def _common(config: BuildConfig) -> dict:
    return {
        "site": config.site_base_url,
        "logo_url": config.logo_url,
        "brand_name": BRAND_NAME,
        "brand_link": BRAND_LINK,
        "instagram_link": INSTAGRAM_LINK,
        "foot_badge": FOOT_BADGE,
        "year": date.today().year,
    }


def render_verse_page(
    config: BuildConfig,
    book: Book,
    chapter: int,
    verse: int,
    verse_text: str | None,
    prev: VerseRef | None,
    nxt: VerseRef | None,
    books_index: list[dict],
    counts: dict[str, dict[str, int]],
) -> str:
    ref_label = f"{book.name} {chapter}:{verse}"
    url = canonical_url(config.site_base_url, book.slug, chapter, verse)
    text = verse_text or ""
    return _env.get_template("verse.html").render(
        **_common(config),
        ref_label=ref_label,
        url=url,
        description=_squash(text)[:DESCRIPTION_CHARS],
        verse_text=text or MISSING_VERSE_TEXT,
        prev_url=ref_url(config.site_base_url, prev),
        next_url=ref_url(config.site_base_url, nxt),
        shares=share_links(url, ref_label, text),
        breadcrumb=breadcrumb_ld(config.site_base_url, book, chapter, verse),
        books_index=books_index,
        counts=counts,
        current={"slug": book.slug, "chapter": chapter, "verse": verse},
    )


def render_book_index(config: BuildConfig, book: Book, first_chapter: int | None) -> str:
    return _env.get_template("book.html").render(
        **_common(config),
        book=book,
        url=canonical_url(config.site_base_url, book.slug),
        first_chapter=first_chapter,
        start_url=(
            canonical_url(config.site_base_url, book.slug, first_chapter, 1)
            if first_chapter is not None else None
        ),
    )


def render_chapter_index(config: BuildConfig, book: Book, chapter: int, verse_count: int) -> str:
    verses = [
        (v, canonical_url(config.site_base_url, book.slug, chapter, v))
        for v in range(1, verse_count + 1)
    ]
    return _env.get_template("chapter.html").render(
        **_common(config),
        book=book,
        chapter=chapter,
        url=canonical_url(config.site_base_url, book.slug, chapter),
        book_url=canonical_url(config.site_base_url, book.slug),
        verses=verses,
    )


def render_redirect(target_url: str) -> str:
    return _env.get_template("redirect.html").render(target=target_url)
