# -*- coding: utf-8 -*-
"""
Tests for per-placeholder image acquisition.
"""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from seo_writer.images import ImageRegistry, acquire_image, search_url


class TestSearchUrl:
    """Tests for the image search fallback link."""

    def test_prompt_is_encoded(self):
        """Prompt is URL-encoded into the search query."""
        url = search_url("latte art & milk")

        assert url == "https://www.google.com/search?tbm=isch&q=latte+art+%26+milk"


@pytest.mark.asyncio
class TestImageRegistry:
    """Tests for ImageRegistry."""

    async def test_successful_acquisition(self):
        """A returned reference marks the prompt ready."""
        acquirer = AsyncMock(return_value="data:image/png;base64,AAA")
        registry = ImageRegistry(acquirer=acquirer)

        result = await registry.acquire("A cup of coffee")

        assert result.status == "ready"
        assert result.image_url == "data:image/png;base64,AAA"
        assert result.search_url.endswith("A+cup+of+coffee")
        assert registry.get("A cup of coffee") == result

    async def test_ready_result_is_reused(self):
        """A ready image is not generated twice."""
        acquirer = AsyncMock(return_value="data:image/png;base64,AAA")
        registry = ImageRegistry(acquirer=acquirer)

        await registry.acquire("Prompt")
        await registry.acquire("Prompt")

        acquirer.assert_awaited_once_with("Prompt")

    async def test_missing_image_is_failed_not_raised(self):
        """No reference means failed, without raising."""
        registry = ImageRegistry(acquirer=AsyncMock(return_value=None))

        result = await registry.acquire("Prompt")

        assert result.status == "failed"
        assert result.image_url is None
        assert result.error == "No image returned"

    async def test_acquirer_exception_is_failed(self):
        """Errors from the acquirer are absorbed."""
        registry = ImageRegistry(acquirer=AsyncMock(side_effect=RuntimeError("quota")))

        result = await registry.acquire("Prompt")

        assert result.status == "failed"
        assert result.error == "quota"

    async def test_explicit_retry_after_failure(self):
        """A new call after a failure is a fresh attempt."""
        acquirer = AsyncMock(side_effect=[None, "data:image/png;base64,BBB"])
        registry = ImageRegistry(acquirer=acquirer)

        first = await registry.acquire("Prompt")
        second = await registry.acquire("Prompt")

        assert first.status == "failed"
        assert second.status == "ready"
        assert acquirer.await_count == 2

    async def test_concurrent_calls_share_one_attempt(self):
        """Callers for the same prompt join the in-flight task."""
        release = asyncio.Event()
        calls = []

        async def acquirer(prompt):
            calls.append(prompt)
            await release.wait()
            return "data:image/png;base64,CCC"

        registry = ImageRegistry(acquirer=acquirer)
        first = asyncio.create_task(registry.acquire("Prompt"))
        second = asyncio.create_task(registry.acquire("Prompt"))
        await asyncio.sleep(0)

        assert registry.get("Prompt").status == "pending"
        release.set()
        results = await asyncio.gather(first, second)

        assert calls == ["Prompt"]
        assert [r.status for r in results] == ["ready", "ready"]

    async def test_prompts_are_independent(self):
        """One prompt failing does not affect another."""

        async def acquirer(prompt):
            return None if prompt == "bad" else "data:image/png;base64,DDD"

        registry = ImageRegistry(acquirer=acquirer)

        good, bad = await asyncio.gather(registry.acquire("good"), registry.acquire("bad"))

        assert good.status == "ready"
        assert bad.status == "failed"
        assert set(registry.results()) == {"good", "bad"}

    async def test_clear_cancels_in_flight(self):
        """Clearing cancels pending work and forgets results."""
        release = asyncio.Event()

        async def acquirer(_prompt):
            await release.wait()
            return "data:image/png;base64,EEE"

        registry = ImageRegistry(acquirer=acquirer)
        pending = asyncio.create_task(registry.acquire("Prompt"))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        registry.clear()
        result = await pending

        assert result.status == "failed"
        assert result.error == "Image request cancelled"
        assert registry.results() == {}

    async def test_default_acquirer_uses_gemini_client(self):
        """The default acquirer delegates to GeminiClient.generate_image."""
        mock_client = AsyncMock()
        mock_client.generate_image = AsyncMock(return_value="data:image/png;base64,FFF")

        with patch("seo_writer.images.get_gemini_client", return_value=mock_client):
            image = await acquire_image("Prompt")

        assert image == "data:image/png;base64,FFF"
        mock_client.generate_image.assert_awaited_once_with("Prompt")
