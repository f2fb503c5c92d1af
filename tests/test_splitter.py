# -*- coding: utf-8 -*-
"""
Tests for render segment splitting.
"""
from seo_writer.splitter import (
    PlaceholderSegment,
    TextSegment,
    extract_prompt,
    join_segments,
    split,
)


class TestSplit:
    """Tests for split()."""

    def test_document_without_markers(self):
        """A plain document is a single text segment."""
        assert split("<p>Hello</p>") == [TextSegment(html="<p>Hello</p>")]

    def test_empty_document(self):
        """Empty input yields one empty text segment."""
        assert split("") == [TextSegment(html="")]

    def test_placeholder_extracted(self):
        """The marker is replaced by a placeholder carrying its prompt."""
        marker = '<div class="image-placeholder" data-prompt="A red bicycle">Image</div>'
        segments = split(f"<p>Before</p>{marker}<p>After</p>")

        assert segments == [
            TextSegment(html="<p>Before</p>"),
            PlaceholderSegment(prompt="A red bicycle", markup=marker),
            TextSegment(html="<p>After</p>"),
        ]

    def test_consecutive_markers_emit_empty_text(self):
        """Adjacent markers are separated by an empty text segment."""
        doc = (
            '<div class="image-placeholder" data-prompt="One"></div>'
            '<div class="image-placeholder" data-prompt="Two"></div>'
        )
        segments = split(doc)

        assert [s.kind for s in segments] == ["text", "placeholder", "text", "placeholder", "text"]
        assert segments[0].html == ""
        assert segments[2].html == ""
        assert [s.prompt for s in segments if s.kind == "placeholder"] == ["One", "Two"]

    def test_marker_without_prompt_is_text(self):
        """A marker lacking data-prompt stays literal markup."""
        doc = '<p>A</p><div class="image-placeholder">Image</div><p>B</p>'

        assert split(doc) == [TextSegment(html=doc)]

    def test_marker_with_blank_prompt_is_text(self):
        """An empty prompt is not actionable."""
        doc = '<div class="image-placeholder" data-prompt="  "></div>'

        assert split(doc) == [TextSegment(html=doc)]

    def test_unclosed_marker_is_text(self):
        """A marker still being streamed is not a placeholder yet."""
        doc = '<p>A</p><div class="image-placeholder" data-prompt="Half'

        assert split(doc) == [TextSegment(html=doc)]

    def test_unclosed_marker_before_closed_marker(self):
        """An unclosed marker stays text and later content is kept."""
        unclosed = '<div class="image-placeholder" data-prompt="A">\n<p>Important paragraph.</p>\n'
        closed = '<div class="image-placeholder" data-prompt="B"></div>'

        segments = split(unclosed + closed)

        assert segments == [
            TextSegment(html=unclosed),
            PlaceholderSegment(prompt="B", markup=closed),
            TextSegment(html=""),
        ]

    def test_marker_body_may_span_lines(self):
        """A closed marker with a multi-line body is one placeholder."""
        marker = '<div class="image-placeholder" data-prompt="C">\n  Image: C\n</div>'

        assert split(marker)[1] == PlaceholderSegment(prompt="C", markup=marker)

    def test_self_closing_marker(self):
        """Self-closed markers are recognized."""
        segments = split('<div class="image-placeholder" data-prompt="Sunrise"/>')

        assert segments[1] == PlaceholderSegment(
            prompt="Sunrise",
            markup='<div class="image-placeholder" data-prompt="Sunrise"/>',
        )

    def test_attribute_order_and_extra_classes(self):
        """Prompt may come first and the class list may hold other classes."""
        doc = "<div data-prompt='Latte art' class=\"wide image-placeholder\"></div>"
        segments = split(doc)

        assert segments[1].prompt == "Latte art"

    def test_ordinary_div_with_prompt_is_not_a_marker(self):
        """Only image placeholders are split out."""
        doc = '<div class="note" data-prompt="x">Note</div>'

        assert split(doc) == [TextSegment(html=doc)]

    def test_duplicates_kept_in_order(self):
        """No deduplication of identical prompts."""
        marker = '<div class="image-placeholder" data-prompt="Same"></div>'
        segments = split(f"{marker}<p>x</p>{marker}")

        assert len([s for s in segments if s.kind == "placeholder"]) == 2


class TestRoundTrip:
    """Tests for rebuilding the document from segments."""

    def test_join_reproduces_document(self, sample_article):
        """Placeholders replace their source span without duplicating it."""
        segments = split(sample_article)

        assert join_segments(segments) == sample_article
        assert sum(1 for s in segments if s.kind == "placeholder") == 1

    def test_text_segments_exclude_marker(self, sample_article):
        """Marker markup appears only in the placeholder segment."""
        segments = split(sample_article)
        text = "".join(s.html for s in segments if s.kind == "text")

        assert "image-placeholder" not in text


class TestExtractPrompt:
    """Tests for prompt attribute parsing."""

    def test_prompt_is_unescaped(self):
        """HTML entities in the attribute are decoded."""
        markup = '<div class="image-placeholder" data-prompt="Fish &amp; chips"></div>'

        assert extract_prompt(markup) == "Fish & chips"

    def test_prompt_in_body_is_ignored(self):
        """Only the opening tag carries the prompt."""
        markup = '<div class="image-placeholder">data-prompt="nope"</div>'

        assert extract_prompt(markup) == ""
