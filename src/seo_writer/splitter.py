# -*- coding: utf-8 -*-
"""
Split a normalized article into render segments.

Image placeholders embedded by the model are pulled out of the markup so the
client can draw an interactive block (generate / search an image) in their
place:

    <div class="image-placeholder" data-prompt="A barista pouring latte art">...</div>
"""
import html
import re
from dataclasses import dataclass
from typing import Literal

PLACEHOLDER_CLASS = "image-placeholder"
PROMPT_ATTRIBUTE = "data-prompt"

# The body may span lines but never contains another <div: an unclosed
# marker must not swallow the content up to a later placeholder.
_MARKER = re.compile(
    rf"""<div\b(?=[^>]*\bclass=["'][^"']*\b{PLACEHOLDER_CLASS}\b)[^>]*?(?:/>|>(?:(?!<div\b).)*?</div>)""",
    re.DOTALL | re.IGNORECASE,
)
_PROMPT = re.compile(rf"""\b{PROMPT_ATTRIBUTE}=(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)


@dataclass
class TextSegment:
    """Literal markup rendered as-is."""

    html: str
    kind: Literal["text"] = "text"


@dataclass
class PlaceholderSegment:
    """Visual idea rendered as an interactive image block."""

    prompt: str
    markup: str = ""
    kind: Literal["placeholder"] = "placeholder"


RenderSegment = TextSegment | PlaceholderSegment


def split(doc: str) -> list[RenderSegment]:
    """
    Partition a normalized document at image placeholder markers.

    Text between markers is emitted even when empty, so consecutive markers
    produce empty text segments. A marker without a usable prompt stays
    literal markup.

    Args:
        doc: Normalized HTML (possibly partial)

    Returns:
        Segments in document order
    """
    segments: list[RenderSegment] = []
    position = 0

    for match in _MARKER.finditer(doc):
        markup = match.group(0)
        prompt = extract_prompt(markup)
        if not prompt:
            continue

        segments.append(TextSegment(html=doc[position:match.start()]))
        segments.append(PlaceholderSegment(prompt=prompt, markup=markup))
        position = match.end()

    segments.append(TextSegment(html=doc[position:]))
    return segments


def extract_prompt(markup: str) -> str:
    """Prompt of a marker, unescaped and trimmed; empty if missing."""
    opening_tag = markup.split(">", 1)[0]
    match = _PROMPT.search(opening_tag)
    if not match:
        return ""
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return html.unescape(value).strip()


def join_segments(segments: list[RenderSegment]) -> str:
    """Rebuild the document from its segments."""
    return "".join(
        segment.markup if isinstance(segment, PlaceholderSegment) else segment.html
        for segment in segments
    )
