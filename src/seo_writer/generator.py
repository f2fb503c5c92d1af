# -*- coding: utf-8 -*-
"""
Article chunk source backed by Gemini.
"""
import logging
from collections.abc import AsyncGenerator

from .gemini_client import get_gemini_client
from .models import ArticleConfig
from .prompts import build_article_prompts

logger = logging.getLogger(__name__)


async def stream_article(config: ArticleConfig) -> AsyncGenerator[str, None]:
    """Stream the HTML of an SEO article for the given configuration."""
    prompts = build_article_prompts(config)
    client = get_gemini_client()

    logger.info(
        "Starting article generation",
        extra={
            "keyword": config.keyword[:60],
            "length": config.length,
            "language": config.language,
            "model": client.model_name,
        },
    )

    async for chunk in client.stream_generate(
            prompts.prompt, system_instruction=prompts.system_instruction
    ):
        yield chunk
