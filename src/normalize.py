"""
Book normalizer: turns any accepted JSON shape for one book into a Book.

Accepted top-level shapes, tried in this order:
  chapter-list   {"chapters": [{"chapter": 1, "verses": ...}, ...]}
  chapter-map    {"chapters": {"1": ..., "2": ...}}
  nested-lists   [[verse, verse, ...], [verse, ...], ...]   (chapter = position)

Accepted verse data for each chapter:
  list   items are objects ({"verse"|"num"|"v": n, "text"|"t": s}) or bare
         scalars (verse = 1-based position)
  dict   {"1": "In the beginning...", ...}

Anything else raises NormalizationError naming the book.  verse_count is never
read from the input; it is always the number of verses produced.
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import Book, Chapter

VERSE_NUMBER_FIELDS = ("verse", "num", "v")
VERSE_TEXT_FIELDS = ("text", "t")


class NormalizationError(ValueError):
    """Raw book JSON matched none of the accepted shapes."""


def _first_present(obj: dict, keys: tuple[str, ...]):
    for k in keys:
        if obj.get(k) is not None:
            return obj[k]
    return None


def _as_text(value) -> str:
    return "" if value is None else str(value)


def _as_key(value) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _chapter_number(book: str, value) -> int:
    try:
        n = float(value)
    except (TypeError, ValueError):
        raise NormalizationError(f"{book}: bad chapter number {value!r}") from None
    if not n.is_integer():
        raise NormalizationError(f"{book}: bad chapter number {value!r}")
    return int(n)


def _verses(book: str, chapter: int, data) -> dict[str, str]:
    """Verse data -> {verse-number-as-str: text}."""
    if data is None:
        return {}
    vmap: dict[str, str] = {}
    if isinstance(data, list):
        for i, item in enumerate(data, 1):
            if isinstance(item, dict):
                num = _first_present(item, VERSE_NUMBER_FIELDS)
                key = _as_key(num) if num is not None else str(i)
                vmap[key] = _as_text(_first_present(item, VERSE_TEXT_FIELDS))
            else:
                vmap[str(i)] = _as_text(item)
        return vmap
    if isinstance(data, dict):
        for k, v in data.items():
            vmap[_as_key(k)] = _as_text(v)
        return vmap
    raise NormalizationError(
        f"{book} {chapter}: unrecognized verse data ({type(data).__name__})"
    )


# ── Shape detection ──────────────────────────────────────────────────────────

def _detect_shape(raw) -> str | None:
    if isinstance(raw, dict):
        chapters = raw.get("chapters")
        if isinstance(chapters, list):
            return "chapter-list"
        if isinstance(chapters, dict):
            return "chapter-map"
        return None
    if isinstance(raw, list) and raw and isinstance(raw[0], list):
        return "nested-lists"
    return None


def _from_chapter_list(name: str, raw: dict) -> dict[int, dict[str, str]]:
    out: dict[int, dict[str, str]] = {}
    for i, ch in enumerate(raw["chapters"], 1):
        if not isinstance(ch, dict):
            raise NormalizationError(f"{name}: chapter entry {i} is not an object")
        num = _chapter_number(name, ch["chapter"]) if ch.get("chapter") is not None else i
        out[num] = _verses(name, num, ch.get("verses"))
    return out


def _from_chapter_map(name: str, raw: dict) -> dict[int, dict[str, str]]:
    out: dict[int, dict[str, str]] = {}
    for key, verses in raw["chapters"].items():
        num = _chapter_number(name, key)
        out[num] = _verses(name, num, verses)
    return out


def _from_nested_lists(name: str, raw: list) -> dict[int, dict[str, str]]:
    return {i: _verses(name, i, chap) for i, chap in enumerate(raw, 1)}


_DECODERS = {
    "chapter-list": _from_chapter_list,
    "chapter-map": _from_chapter_map,
    "nested-lists": _from_nested_lists,
}


def normalize_book(name: str, raw) -> Book:
    """Decode one book's raw JSON into a Book with chapters in ascending order."""
    shape = _detect_shape(raw)
    if shape is None:
        raise NormalizationError(f"Unrecognized book JSON structure for {name}")
    chapters = _DECODERS[shape](name, raw)
    return Book(
        name=name,
        chapters=tuple(Chapter(num, chapters[num]) for num in sorted(chapters)),
    )
