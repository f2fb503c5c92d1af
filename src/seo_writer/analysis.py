# -*- coding: utf-8 -*-
"""
Content health analysis: keyword density, reading time and SEO scores.
"""
import math
import re

from pydantic import BaseModel

from .config import settings
from .extractor import strip_tags
from .pipeline import PipelineResult

# Density considered healthy, in percent
DENSITY_TARGET_MIN = 1.5
DENSITY_TARGET_MAX = 2.5

SHORT_CONTENT_WORDS = 500


class SeoMetric(BaseModel):
    """One axis of the SEO health radar."""

    name: str
    score: float
    full_mark: int = 100


class ContentAnalysis(BaseModel):
    """Health report for the current article."""

    keyword: str
    word_count: int
    reading_time: int
    keyword_density: float
    density_score: float
    density_in_target: bool
    metrics: list[SeoMetric]
    suggestion: str


def keyword_density(text: str, keyword: str, word_count: int) -> float:
    """
    Occurrences of the keyword per 100 words.

    Matching is case-insensitive and literal, on the tag-stripped text so
    attribute values and tag names are not counted.
    """
    keyword = keyword.strip()
    if not text or not keyword or word_count <= 0:
        return 0.0

    occurrences = len(re.findall(re.escape(keyword), strip_tags(text), re.IGNORECASE))
    return round(occurrences / word_count * 100, 2)


def reading_time(word_count: int) -> int:
    """Estimated reading time in whole minutes."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / settings.WORDS_PER_MINUTE)


def seo_metrics(word_count: int, outline_size: int, density: float) -> list[SeoMetric]:
    """Score the article on five axes, each out of 100."""
    return [
        SeoMetric(name="Readability", score=min(100.0, word_count / 10 + 50)),
        SeoMetric(name="Structure", score=min(100.0, outline_size * 10.0)),
        SeoMetric(name="Keywords", score=90.0 if density > 0.5 else 40.0),
        SeoMetric(name="Length", score=min(100.0, word_count / 20)),
        SeoMetric(name="Sentiment", score=85.0),
    ]


def suggestion(word_count: int) -> str:
    """One-line editorial advice based on the article length."""
    if word_count < SHORT_CONTENT_WORDS:
        return "Content is still brief. Aim for at least 1,200 words for deep topic coverage."
    return "Great length! Ensure you have sufficient internal links and images to break up the text."


def analyze(result: PipelineResult, keyword: str) -> ContentAnalysis:
    """Build the full health report for a pipeline result."""
    density = keyword_density(result.normalized, keyword, result.word_count)
    return ContentAnalysis(
        keyword=keyword,
        word_count=result.word_count,
        reading_time=reading_time(result.word_count),
        keyword_density=density,
        # 2% is treated as the ideal density
        density_score=min(100.0, density / 2 * 100),
        density_in_target=DENSITY_TARGET_MIN <= density <= DENSITY_TARGET_MAX,
        metrics=seo_metrics(result.word_count, len(result.outline), density),
        suggestion=suggestion(result.word_count),
    )
