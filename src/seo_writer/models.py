# -*- coding: utf-8 -*-
"""
Pydantic data models for the API.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .extractor import OutlineEntry
from .splitter import PlaceholderSegment, TextSegment


class ArticleConfig(BaseModel):
    """Article generation request schema (immutable)."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(default="", description="Main topic keyword")
    secondary_keywords: str = Field(
        default="", description="Comma-separated related keywords"
    )
    intent: Literal["informational", "transactional", "listicle"] = "informational"
    audience: Literal["beginners", "experts", "business"] = "beginners"
    length: Literal["short", "standard", "long"] = "standard"
    language: Literal["English", "Spanish", "French"] = "English"
    tone: Literal[
        "professional", "casual", "enthusiastic", "witty", "authoritative", "empathetic"
    ] = "professional"
    clickbait: bool = Field(default=False, description="Use a high-CTR H1 title")
    include_images: bool = Field(
        default=True, description="Ask for image placeholders in the article"
    )
    include_faq: bool = Field(default=False, description="Append an FAQ section")


class GenerateResponse(BaseModel):
    """Generation start acknowledgement."""

    session_id: str
    status: str


class ImageResult(BaseModel):
    """Image acquisition state of one placeholder prompt."""

    prompt: str
    status: Literal["pending", "ready", "failed"] = "pending"
    image_url: str | None = None
    search_url: str = ""
    error: str | None = None


class ImageRequest(BaseModel):
    """Image acquisition request schema."""

    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: str = Field(..., min_length=1, description="Visual idea to illustrate")


class ArticleSnapshot(BaseModel):
    """Live state of the article being generated."""

    session_id: str | None = None
    status: Literal["idle", "generating", "failed"] = "idle"
    error: str | None = None
    keyword: str = ""
    chunk_count: int = 0
    word_count: int = 0
    reading_time: int = 0
    title: str = ""
    description: str = ""
    html: str = ""
    outline: list[OutlineEntry] = Field(default_factory=list)
    segments: list[TextSegment | PlaceholderSegment] = Field(default_factory=list)
    images: dict[str, ImageResult] = Field(default_factory=dict)


class NormalizeRequest(BaseModel):
    """Stateless pipeline request schema."""

    text: str = Field(default="", description="Raw model output to process")


class NormalizeResponse(BaseModel):
    """Stateless pipeline response schema."""

    html: str
    word_count: int
    title: str
    description: str
    outline: list[OutlineEntry]
    segments: list[TextSegment | PlaceholderSegment]
    steps_applied: list[str]


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
    generating: bool = False
    gemini_configured: bool = False
