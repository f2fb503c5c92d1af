# -*- coding: utf-8 -*-
"""
Structural extraction from a normalized article.

Derives word count, title, meta description and the H2/H3 outline. Each
field is computed independently: a field that is not (yet) present in the
document yields its empty default, it never raises.
"""
import re
from dataclasses import dataclass, field
from typing import Literal

# Hidden meta description container ids, in lookup order
META_DESCRIPTION_IDS = ["meta-description", "meta-desc"]

_TAG = re.compile(r"<[^>]*>")
_TITLE = re.compile(r"<h1\b[^>]*>(.*?)</h1>", re.DOTALL | re.IGNORECASE)
_HEADING = re.compile(r"<(h[23])\b[^>]*>(.*?)</\1>", re.DOTALL | re.IGNORECASE)
_SLUG_INVALID = re.compile(r"[^\w]+")


@dataclass
class OutlineEntry:
    """One H2/H3 heading of the outline."""

    id: str
    text: str
    level: Literal[2, 3]
    anchor: str = ""


@dataclass
class ExtractionResult:
    """Structural metadata of a document."""

    word_count: int = 0
    title: str = ""
    description: str = ""
    outline: list[OutlineEntry] = field(default_factory=list)


def extract(doc: str) -> ExtractionResult:
    """
    Extract structural metadata from a normalized document.

    Args:
        doc: Normalized HTML (possibly partial)

    Returns:
        ExtractionResult, with empty defaults for every missing field
    """
    return ExtractionResult(
        word_count=count_words(doc),
        title=extract_title(doc),
        description=extract_description(doc),
        outline=extract_outline(doc),
    )


def strip_tags(html: str) -> str:
    """Replace every tag with a single space."""
    return _TAG.sub(" ", html)


def count_words(doc: str) -> int:
    """Count whitespace-separated tokens of the tag-stripped text."""
    return len(strip_tags(doc).split())


def extract_title(doc: str) -> str:
    """Inner content of the first <h1>, verbatim (nested tags kept)."""
    match = _TITLE.search(doc)
    return match.group(1) if match else ""


def extract_description(doc: str) -> str:
    """Inner content of the hidden meta description <div>."""
    for element_id in META_DESCRIPTION_IDS:
        pattern = re.compile(
            rf"""<div\b[^>]*\bid=["']{re.escape(element_id)}["'][^>]*>(.*?)</div>""",
            re.DOTALL | re.IGNORECASE,
        )
        match = pattern.search(doc)
        if match:
            return match.group(1)
    return ""


def extract_outline(doc: str) -> list[OutlineEntry]:
    """
    Collect every <h2> and <h3> in document order.

    ``id`` is a sequential token (``heading-0``, ``heading-1``, ...) valid for
    this pass only. ``anchor`` is derived from the heading text and does not
    move when other headings are inserted before it.
    """
    outline: list[OutlineEntry] = []
    seen_anchors: dict[str, int] = {}

    for match in _HEADING.finditer(doc):
        text = _TAG.sub("", match.group(2))
        outline.append(
            OutlineEntry(
                id=f"heading-{len(outline)}",
                text=text,
                level=int(match.group(1)[1]),
                anchor=_unique_anchor(text, seen_anchors),
            )
        )

    return outline


def slugify(text: str) -> str:
    """Lowercase, word characters only, joined by hyphens."""
    return _SLUG_INVALID.sub("-", text.lower()).strip("-_")


def _unique_anchor(text: str, seen: dict[str, int]) -> str:
    base = slugify(text) or "section"
    seen[base] = seen.get(base, 0) + 1
    if seen[base] == 1:
        return base
    return f"{base}-{seen[base]}"
