# -*- coding: utf-8 -*-
"""
SEO Writer Service - Streaming SEO article generation microservice.
"""
__version__ = "1.0.0"

from .api import app  # noqa: E402
from .models import ArticleConfig, ArticleSnapshot  # noqa: E402

__all__ = ["app", "ArticleConfig", "ArticleSnapshot", "__version__"]
