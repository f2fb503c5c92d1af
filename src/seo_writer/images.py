# -*- coding: utf-8 -*-
"""
Per-placeholder image acquisition.

Results are keyed by prompt text, not by segment position: segments are
re-derived on every chunk and their positions shift as the article grows.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from urllib.parse import quote_plus

from .config import settings
from .gemini_client import get_gemini_client
from .models import ImageResult

logger = logging.getLogger(__name__)

ImageAcquirer = Callable[[str], Awaitable[str | None]]


def search_url(prompt: str) -> str:
    """Image search link for a prompt."""
    return f"{settings.IMAGE_SEARCH_URL}{quote_plus(prompt)}"


async def acquire_image(prompt: str) -> str | None:
    """Synthesize an image with the default Gemini client."""
    return await get_gemini_client().generate_image(prompt)


class ImageRegistry:
    """
    Tracks one image acquisition per prompt.

    Each prompt is acquired by its own task, concurrently with the others
    (bounded by a semaphore). A ready image is reused; a failed one is only
    attempted again on an explicit new call.
    """

    def __init__(
            self,
            acquirer: ImageAcquirer | None = None,
            max_concurrent: int | None = None,
    ):
        self._acquirer = acquirer or acquire_image
        self._semaphore = asyncio.Semaphore(
            max_concurrent or settings.MAX_CONCURRENT_IMAGE_REQUESTS
        )
        self._results: dict[str, ImageResult] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def get(self, prompt: str) -> ImageResult | None:
        """Current result for a prompt, if any acquisition was requested."""
        return self._results.get(prompt.strip())

    def results(self) -> dict[str, ImageResult]:
        """Snapshot of all results keyed by prompt."""
        return dict(self._results)

    async def acquire(self, prompt: str) -> ImageResult:
        """
        Acquire an image for a prompt, joining an in-flight attempt if any.

        Args:
            prompt: Visual idea description

        Returns:
            ImageResult with status "ready" or "failed"
        """
        prompt = prompt.strip()
        existing = self._results.get(prompt)
        if existing is not None and existing.status == "ready":
            return existing

        task = self._tasks.get(prompt)
        if task is None or task.done():
            self._results[prompt] = ImageResult(
                prompt=prompt, status="pending", search_url=search_url(prompt)
            )
            task = asyncio.create_task(self._run(prompt))
            self._tasks[prompt] = task

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            return ImageResult(
                prompt=prompt,
                status="failed",
                search_url=search_url(prompt),
                error="Image request cancelled",
            )

    async def _run(self, prompt: str) -> ImageResult:
        async with self._semaphore:
            logger.info("Acquiring image", extra={"prompt": prompt[:80]})
            try:
                image_url = await self._acquirer(prompt)
                error = None if image_url else "No image returned"
            except Exception as e:
                logger.error(f"Image acquisition failed: {e}", extra={"prompt": prompt[:80]})
                image_url, error = None, str(e)

        result = ImageResult(
            prompt=prompt,
            status="ready" if image_url else "failed",
            image_url=image_url,
            search_url=search_url(prompt),
            error=error,
        )
        self._results[prompt] = result
        self._tasks.pop(prompt, None)
        return result

    def clear(self):
        """Forget all results and cancel in-flight acquisitions."""
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
        self._results.clear()
