# -*- coding: utf-8 -*-
"""
Markdown repair for generated HTML.

The model is told to answer in raw HTML but regularly falls back to Markdown
(``## Heading``, ``**bold**``, ``- item``). The rules below rewrite the known
leaks into the fixed tag vocabulary:

    h1, h2, h3, p, ul, ol, li, strong, em, blockquote, div

Rules are ordered regex substitutions, not a parser. Anything they do not
recognize passes through verbatim. No escaping is performed.
"""
import re

# Code fence wrapping the whole answer (```html ... ```)
_LEADING_FENCE = re.compile(r"\A\s*```[A-Za-z]*[ \t]*(?:\n|\Z)")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*\Z")

# Longest marker first so "###" is never read as "#" + "##"
HEADING_RULES = [
    (re.compile(r"^###[ \t]+([^\r\n]+)", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"^##[ \t]+([^\r\n]+)", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"^#[ \t]+([^\r\n]+)", re.MULTILINE), r"<h1>\1</h1>"),
]

# [^*] also matches newlines: bold spans may cover several sentences
_BOLD = re.compile(r"\*\*[ \t]?([^*]+?)[ \t]?\*\*")

# Single line only, never adjacent to another asterisk
_ITALIC = re.compile(r"(?<!\*)\*(?!\*)[ \t]?([^*\n]+?)[ \t]?(?<!\*)\*(?!\*)")

# "* item" / "- item" at line start
_BULLET_PREFIX = re.compile(r"^[ \t]*\*[ \t]+")
_LIST_ITEM = re.compile(r"^[ \t]*[-*][ \t]+([^\r\n]+)", re.MULTILINE)

_DOUBLED_EMPHASIS = re.compile(r"<(strong|em)>\s*<\1>(.*?)</\1>\s*</\1>", re.DOTALL)


def normalize(buffer: str) -> str:
    """
    Repair Markdown leaking into an HTML buffer.

    Total and deterministic: any string is accepted, the same input always
    yields the same output, and already-valid HTML comes back unchanged.

    Args:
        buffer: Accumulated model output (possibly partial)

    Returns:
        HTML restricted to the target tag vocabulary where repairs applied
    """
    if not buffer:
        return ""

    content = strip_code_fence(buffer)
    content = convert_headings(content)
    content = convert_bold(content)
    content = convert_italics(content)
    content = convert_list_items(content)
    content = collapse_doubled_emphasis(content)
    return content


def strip_code_fence(content: str) -> str:
    """Remove a Markdown code fence wrapped around the whole answer."""
    content = _LEADING_FENCE.sub("", content, count=1)
    return _TRAILING_FENCE.sub("", content, count=1)


def convert_headings(content: str) -> str:
    """``### Sub`` / ``## Mid`` / ``# Top`` at line start to h3 / h2 / h1."""
    for pattern, replacement in HEADING_RULES:
        content = pattern.sub(replacement, content)
    return content


def convert_bold(content: str) -> str:
    """``**text**`` (or ``** text **``) to ``<strong>text</strong>``."""
    return _BOLD.sub(r"<strong>\1</strong>", content)


def convert_italics(content: str) -> str:
    """
    ``*text*`` to ``<em>text</em>``.

    A bullet marker (``* `` at line start) is kept out of the match, but
    emphasis inside the list item itself is still converted.
    """
    if "*" not in content:
        return content

    lines = content.split("\n")
    for index, line in enumerate(lines):
        if "*" not in line:
            continue
        bullet = _BULLET_PREFIX.match(line)
        prefix = bullet.group(0) if bullet else ""
        lines[index] = prefix + _ITALIC.sub(r"<em>\1</em>", line[len(prefix):])
    return "\n".join(lines)


def convert_list_items(content: str) -> str:
    """
    ``- item`` / ``* item`` at line start to ``<li>item</li>``.

    Items are not wrapped in a ``<ul>``; browsers render bare items fine.
    """
    return _LIST_ITEM.sub(r"<li>\1</li>", content)


def collapse_doubled_emphasis(content: str) -> str:
    """Collapse ``<strong><strong>x</strong></strong>`` into a single pair."""
    previous = None
    while previous != content:
        previous = content
        content = _DOUBLED_EMPHASIS.sub(r"<\1>\2</\1>", content)
    return content
