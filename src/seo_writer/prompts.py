# -*- coding: utf-8 -*-
"""
Prompt construction for article generation.
"""
from dataclasses import dataclass

from .jinja_env import render_prompt
from .models import ArticleConfig

LENGTH_DETAILS = {
    "short": "around 600-800 words, concise",
    "standard": "around 1200-1500 words, depth",
    "long": "over 2500 words, exhaustive",
}

CLICKBAIT_TITLE_INSTRUCTION = (
    "The H1 Title MUST be highly clickbait, using power words (e.g., 'Shocking', "
    "'Ultimate', 'Insane'), and psychologically compelling the user to click."
)
SEO_TITLE_INSTRUCTION = "The H1 Title MUST be SEO-optimized, clear, and professional."

# Tag vocabulary the normalizer targets
ALLOWED_TAGS = ["h1", "h2", "h3", "p", "ul", "ol", "li", "strong", "em", "blockquote"]


@dataclass(frozen=True)
class ArticlePrompts:
    """System instruction and user prompt for one article."""

    system_instruction: str
    prompt: str


def build_article_prompts(config: ArticleConfig) -> ArticlePrompts:
    """Render both prompts for an article configuration."""
    title_instruction = (
        CLICKBAIT_TITLE_INSTRUCTION if config.clickbait else SEO_TITLE_INSTRUCTION
    )

    system_instruction = render_prompt(
        "article_system.j2",
        allowed_tags=ALLOWED_TAGS,
        title_instruction=title_instruction,
        include_images=config.include_images,
        tone=config.tone,
        language=config.language,
    )
    prompt = render_prompt(
        "article_prompt.j2",
        keyword=config.keyword.strip(),
        secondary_keywords=config.secondary_keywords.strip(),
        length=config.length,
        length_details=LENGTH_DETAILS[config.length],
        intent=config.intent,
        audience=config.audience,
        clickbait=config.clickbait,
        include_faq=config.include_faq,
    )
    return ArticlePrompts(system_instruction=system_instruction, prompt=prompt)
