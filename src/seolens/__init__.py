"""
SeoLens - Structured SEO page-data extraction.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .exceptions import DocumentUnavailableError, InvalidRequestError, SeoLensError
from .extraction import PageDocument, SeoExtractor, SeoSnapshot
from .messaging import handle_message

__all__ = [
    "__version__",
    "Config",
    "PageDocument",
    "SeoExtractor",
    "SeoSnapshot",
    "handle_message",
    "SeoLensError",
    "DocumentUnavailableError",
    "InvalidRequestError",
]
