# -*- coding: utf-8 -*-
"""
Generation session driver.

Owns the accumulated buffer of the article being generated and the session
state machine:

    idle -> generating -> idle              (stream completed)
    idle -> generating -> failed -> idle    (stream broke, buffer kept)

Every chunk is appended in arrival order and the whole document pipeline is
re-run on the full buffer; the derived state replaces the previous one.
At most one generation is active: starting a new one cancels the old stream.
"""
import asyncio
import logging
import uuid
from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum

from .analysis import reading_time
from .generator import stream_article
from .images import ImageRegistry
from .middleware import session_id_ctx
from .models import ArticleConfig, ArticleSnapshot
from .pipeline import DocumentPipeline, PipelineResult, document_pipeline

logger = logging.getLogger(__name__)

STREAM_FAILURE_MESSAGE = "Failed to generate content. Please try again."

ChunkSource = Callable[[ArticleConfig], AsyncGenerator[str, None]]
Observer = Callable[[ArticleSnapshot], None]


class SessionStatus(str, Enum):
    """Lifecycle state of a generation session."""

    IDLE = "idle"
    GENERATING = "generating"
    FAILED = "failed"


class EmptyKeywordError(ValueError):
    """Generation requested without a topic keyword."""

    pass


@dataclass
class SessionState:
    """Mutable state of the current generation session."""

    session_id: str | None = None
    status: SessionStatus = SessionStatus.IDLE
    config: ArticleConfig | None = None
    buffer: str = ""
    chunk_count: int = 0
    error: str | None = None
    result: PipelineResult = field(default_factory=PipelineResult)


class ArticleSession:
    """
    Single-consumer driver for article generation streams.

    Observers are plain callables receiving an ArticleSnapshot after every
    state change. An observer that raises is logged and skipped.
    """

    def __init__(
            self,
            chunk_source: ChunkSource | None = None,
            pipeline: DocumentPipeline | None = None,
            images: ImageRegistry | None = None,
    ):
        self._chunk_source = chunk_source or stream_article
        self._pipeline = pipeline or document_pipeline
        self.images = images or ImageRegistry()
        self.state = SessionState()
        self._observers: list[Observer] = []
        self._task: asyncio.Task | None = None
        # Held across stop, reset and task creation so two starts never overlap
        self._lock = asyncio.Lock()

    @property
    def is_generating(self) -> bool:
        """Check if a stream is being consumed."""
        return self.state.status == SessionStatus.GENERATING

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            Function removing the observer again
        """
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def start(self, config: ArticleConfig) -> str:
        """
        Start a new generation session.

        Any active generation is cancelled first and all derived state is
        reset.

        Args:
            config: Article configuration (keyword required)

        Returns:
            New session ID

        Raises:
            EmptyKeywordError: If the keyword is blank
        """
        if not config.keyword.strip():
            raise EmptyKeywordError("A topic keyword is required to generate an article")

        async with self._lock:
            await self._stop()

            session_id = uuid.uuid4().hex
            self.images.clear()
            self.state = SessionState(
                session_id=session_id,
                status=SessionStatus.GENERATING,
                config=config,
            )
            self._publish()

            self._task = asyncio.create_task(self._consume(session_id, config))

        logger.info(
            "Generation session started",
            extra={"session_id": session_id, "keyword": config.keyword[:60]},
        )
        return session_id

    async def cancel(self):
        """Stop listening to the active stream, if any."""
        async with self._lock:
            await self._stop()

    async def _stop(self):
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info(
                "Generation session cancelled",
                extra={"session_id": self.state.session_id},
            )

        if self.state.status == SessionStatus.GENERATING:
            self.state.status = SessionStatus.IDLE
            self._publish()

    async def wait(self):
        """Wait for the active stream to finish."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def close(self):
        """Cancel generation and pending image acquisitions."""
        await self.cancel()
        self.images.clear()

    def append_chunk(self, chunk: str) -> PipelineResult:
        """
        Append a chunk and recompute the derived state from the full buffer.

        Args:
            chunk: Next text fragment, in arrival order

        Returns:
            Fresh PipelineResult for the whole buffer
        """
        self.state.buffer += chunk
        self.state.chunk_count += 1
        self.state.result = self._pipeline.process(self.state.buffer)
        self._publish()
        return self.state.result

    async def _consume(self, session_id: str, config: ArticleConfig):
        session_id_ctx.set(session_id)

        try:
            async with aclosing(self._chunk_source(config)) as stream:
                async for chunk in stream:
                    if chunk:
                        self.append_chunk(chunk)
        except Exception as e:
            logger.error(
                f"Generation stream failed: {e}",
                extra={
                    "chunk_count": self.state.chunk_count,
                    "buffer_length": len(self.state.buffer),
                },
            )
            self.state.status = SessionStatus.FAILED
            self.state.error = STREAM_FAILURE_MESSAGE
            self._publish()
            # Partial content stays viewable and exportable
            self.state.status = SessionStatus.IDLE
            self._publish()
            return

        self.state.status = SessionStatus.IDLE
        self._publish()
        logger.info(
            "Generation session completed",
            extra={
                "chunk_count": self.state.chunk_count,
                "word_count": self.state.result.word_count,
            },
        )

    def snapshot(self) -> ArticleSnapshot:
        """Build the current render state."""
        state = self.state
        result = state.result
        return ArticleSnapshot(
            session_id=state.session_id,
            status=state.status.value,
            error=state.error,
            keyword=state.config.keyword if state.config else "",
            chunk_count=state.chunk_count,
            word_count=result.word_count,
            reading_time=reading_time(result.word_count),
            title=result.title,
            description=result.description,
            html=result.normalized,
            outline=result.outline,
            segments=result.segments,
            images=self.images.results(),
        )

    def serialize(self) -> str:
        """Exportable article: the normalized document, verbatim."""
        return self.state.result.normalized

    def _publish(self):
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(f"Session observer failed: {e}")


# Global session instance
article_session = ArticleSession()
