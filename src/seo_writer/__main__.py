# -*- coding: utf-8 -*-
"""
Run the article service: python -m seo_writer [--host H] [--port P] [--reload]
"""
import argparse

import uvicorn

from seo_writer.config import config


def main():
    """Parse command-line overrides and start Uvicorn."""
    parser = argparse.ArgumentParser(description="SEO Writer service")
    parser.add_argument("--host", default=config.HOST, help=f"Bind address (default: {config.HOST})")
    parser.add_argument("--port", type=int, default=config.PORT, help=f"Port (default: {config.PORT})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "seo_writer.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
