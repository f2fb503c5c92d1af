# -*- coding: utf-8 -*-
"""
FastAPI API for the article generation service.
"""
import asyncio
import json
import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import Response, StreamingResponse

from . import __version__
from .analysis import ContentAnalysis, analyze
from .auth import RequireApiKey
from .config import config
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .models import (
    ArticleConfig,
    ArticleSnapshot,
    GenerateResponse,
    HealthResponse,
    ImageRequest,
    ImageResult,
    NormalizeRequest,
    NormalizeResponse,
)
from .pipeline import document_pipeline
from .session import EmptyKeywordError, article_session

# Setup structured logging
setup_logging()
logger = logging.getLogger(__name__)

# Seconds between SSE keep-alive comments
EVENTS_KEEPALIVE = 15


# noinspection PyUnusedLocal
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifecycle management."""
    logger.info("Starting SEO Writer service", extra={"version": __version__})

    yield

    logger.info("Shutting down SEO Writer service")
    await article_session.close()


app = FastAPI(
    title="SEO Writer Service",
    description="Streaming SEO article generation with live HTML repair and outline extraction",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if config.DOCS_ENABLED else None,
    redoc_url="/redoc" if config.DOCS_ENABLED else None,
)

# Middleware stack (order matters: last added = first executed)
app.add_middleware(GZipMiddleware, minimum_size=config.GZIP_MIN_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service health endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        generating=article_session.is_generating,
        gemini_configured=bool(config.GEMINI_API_KEY),
    )


@app.post("/generate", response_model=GenerateResponse, status_code=202)
async def generate_article(request: ArticleConfig, _auth: RequireApiKey) -> GenerateResponse:
    """
    Start generating an article. Any generation in progress is cancelled.

    Follow progress with GET /article or GET /article/events.
    """
    try:
        session_id = await article_session.start(request)
    except EmptyKeywordError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return GenerateResponse(session_id=session_id, status=article_session.state.status.value)


@app.post("/generate/cancel", response_model=ArticleSnapshot)
async def cancel_generation(_auth: RequireApiKey) -> ArticleSnapshot:
    """Stop the active generation; the partial article is kept."""
    await article_session.cancel()
    return article_session.snapshot()


@app.get("/article", response_model=ArticleSnapshot)
async def get_article() -> ArticleSnapshot:
    """Current article state: HTML, metadata, outline and render segments."""
    return article_session.snapshot()


@app.get("/article/events")
async def article_events(request: Request) -> StreamingResponse:
    """
    Server-sent events: one snapshot per article update.

    The stream ends once the session is no longer generating.
    """
    queue: asyncio.Queue[ArticleSnapshot] = asyncio.Queue(maxsize=1)
    unsubscribe = article_session.subscribe(keep_latest(queue))

    async def event_stream():
        try:
            snapshot = article_session.snapshot()
            yield _sse(snapshot)
            while snapshot.status == "generating":
                if await request.is_disconnected():
                    break
                try:
                    snapshot = await asyncio.wait_for(queue.get(), timeout=EVENTS_KEEPALIVE)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield _sse(snapshot)
        finally:
            unsubscribe()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


def keep_latest(queue: asyncio.Queue) -> Callable[[ArticleSnapshot], None]:
    """
    Observer putting snapshots into a one-slot queue.

    Each snapshot replaces the previous one, so an unread snapshot is
    dropped rather than queued behind the newer state.
    """

    def offer(snapshot: ArticleSnapshot):
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(snapshot)

    return offer


def _sse(snapshot: ArticleSnapshot) -> str:
    return f"event: article\ndata: {json.dumps(snapshot.model_dump(mode='json'))}\n\n"


@app.get("/article/export")
async def export_article() -> Response:
    """Download the normalized article HTML."""
    filename = f"article-{int(time.time() * 1000)}.html"
    return Response(
        content=article_session.serialize(),
        media_type="text/html",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/article/analysis", response_model=ContentAnalysis)
async def article_analysis() -> ContentAnalysis:
    """Keyword density, reading time and SEO health scores."""
    state = article_session.state
    keyword = state.config.keyword if state.config else ""
    return analyze(state.result, keyword)


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_text(request: NormalizeRequest) -> NormalizeResponse:
    """Run the document pipeline on arbitrary text, without a session."""
    result = document_pipeline.process(request.text)
    return NormalizeResponse(
        html=result.normalized,
        word_count=result.word_count,
        title=result.title,
        description=result.description,
        outline=result.outline,
        segments=result.segments,
        steps_applied=result.steps_applied,
    )


@app.post("/images", response_model=ImageResult)
async def acquire_image(request: ImageRequest, _auth: RequireApiKey) -> ImageResult:
    """
    Generate an image for a placeholder prompt.

    A failed result is returned with status "failed"; post again to retry.
    """
    result = await article_session.images.acquire(request.prompt)
    logger.info(
        "Image request completed",
        extra={"prompt": request.prompt[:60], "status": result.status},
    )
    return result


@app.get("/images", response_model=dict[str, ImageResult])
async def list_images() -> dict[str, ImageResult]:
    """Image results of the current session, keyed by prompt."""
    return article_session.images.results()
