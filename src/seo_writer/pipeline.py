# -*- coding: utf-8 -*-
"""
Document Processing Pipeline for streamed article HTML.

Implements a chain of responsibility pattern with configurable steps:
1. Markdown Repair - Convert leaked Markdown into the HTML tag vocabulary
2. Structure Extraction - Word count, title, meta description, outline
3. Segment Split - Separate literal markup from image placeholders

The pipeline is re-run on the whole accumulated buffer after every chunk.
Every step is a pure function of its input, so feeding a document in one
chunk or in many yields the same result.
"""
import logging
from dataclasses import dataclass, field

from .config import settings
from .extractor import OutlineEntry, extract
from .normalizer import normalize
from .splitter import RenderSegment, TextSegment, split

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of the document processing pipeline."""

    normalized: str = ""
    word_count: int = 0
    title: str = ""
    description: str = ""
    outline: list[OutlineEntry] = field(default_factory=list)
    segments: list[RenderSegment] = field(default_factory=list)
    steps_applied: list[str] = field(default_factory=list)

    @property
    def placeholder_prompts(self) -> list[str]:
        """Prompts of all placeholder segments, in document order."""
        return [s.prompt for s in self.segments if not isinstance(s, TextSegment)]


class DocumentPipeline:
    """
    Document processing pipeline turning a raw buffer into render state.

    Markdown repair can be disabled via configuration; extraction and
    splitting always run.
    """

    def process(self, buffer: str) -> PipelineResult:
        """
        Process an accumulated buffer through the pipeline.

        Args:
            buffer: Raw model output received so far

        Returns:
            PipelineResult with normalized HTML and derived state
        """
        result = PipelineResult()
        current = buffer

        # Step 1: Markdown Repair
        if settings.ENABLE_MARKDOWN_REPAIR:
            current = normalize(current)
            result.steps_applied.append("markdown_repair")
        result.normalized = current

        # Step 2: Structure Extraction
        extraction = extract(current)
        result.word_count = extraction.word_count
        result.title = extraction.title
        result.description = extraction.description
        result.outline = extraction.outline
        result.steps_applied.append("structure_extraction")

        # Step 3: Segment Split
        result.segments = split(current)
        result.steps_applied.append("segment_split")

        logger.debug(
            "Pipeline completed",
            extra={
                "buffer_length": len(buffer),
                "word_count": result.word_count,
                "headings": len(result.outline),
                "segments": len(result.segments),
            },
        )
        return result


# Global pipeline instance
document_pipeline = DocumentPipeline()
