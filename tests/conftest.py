# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from seo_writer.api import app
from seo_writer.config import settings
from seo_writer.images import ImageRegistry
from seo_writer.session import ArticleSession, SessionState, article_session


class AuthenticatedTestClient(TestClient):
    """Test client with API key authentication."""

    def __init__(self, *args, api_key: str = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.api_key = api_key or settings.API_KEY

    def request(self, method, url, **kwargs):
        headers = kwargs.get("headers") or {}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        kwargs["headers"] = headers
        return super().request(method, url, **kwargs)


@pytest.fixture
def client():
    """FastAPI test client with API key (for /generate and /images)."""
    return AuthenticatedTestClient(app, raise_server_exceptions=False)


@pytest.fixture
def unauthenticated_client():
    """FastAPI test client without authentication."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(autouse=True)
def reset_global_session():
    """Give every test a fresh global session state."""
    article_session.state = SessionState()
    article_session.images.clear()
    yield
    article_session.state = SessionState()
    article_session.images.clear()


@pytest.fixture
def sample_article() -> str:
    """Well-formed article as the model is asked to produce it."""
    return (
        "<h1>My Title</h1>\n"
        '<div id="meta-description" style="display:none">A short description.</div>\n'
        "<p>Coffee is <strong>great</strong> in the morning.</p>\n"
        "<h2>Why Coffee</h2>\n"
        "<p>It wakes you up.</p>\n"
        '<div class="image-placeholder" data-prompt="A steaming cup of coffee"></div>\n'
        "<h2>How to Brew</h2>\n"
        "<h3>Pour <em>Over</em></h3>\n"
        "<ul><li>Grind beans</li><li>Boil water</li></ul>\n"
        "<h2>Conclusion</h2>\n"
        "<p>Enjoy your cup.</p>"
    )


@pytest.fixture
def markdown_leaking_article() -> str:
    """Article where the model fell back to Markdown halfway through."""
    return (
        "# Brewing Guide\n"
        '<div id="meta-desc">Learn to brew.</div>\n'
        "## Equipment\n"
        "You need **a good grinder** and *patience*.\n"
        "- Kettle\n"
        "* Scale\n"
        "### Water\n"
        "Use filtered water."
    )


def make_chunk_source(chunks, error: Exception | None = None, delay: float = 0):
    """Build a fake chunk source yielding the given chunks, then failing if asked."""

    async def source(_config):
        for chunk in chunks:
            if delay:
                await asyncio.sleep(delay)
            yield chunk
        if error is not None:
            raise error

    return source


@pytest.fixture
def session_factory():
    """Create isolated sessions with a fake chunk source and image acquirer."""

    def factory(chunks=(), error=None, delay=0, acquirer=None):
        return ArticleSession(
            chunk_source=make_chunk_source(chunks, error=error, delay=delay),
            images=ImageRegistry(acquirer=acquirer),
        )

    return factory
