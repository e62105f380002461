"""
SeoLens Extraction Module - Structured Page-Data Extraction

Scans a parsed HTML document and produces a JSON-serializable SeoSnapshot:

- ImageExtractor: ordered source strategies (inline SVG, srcset, lazy
  attributes, src, CSS background) with dedup and tiny-image filtering
- Link classification: internal/external/follow/nofollow/mailto/tel
- Contact extraction: emails and phones from links, text and meta tags
- StructuredDataParser: JSON-LD, Microdata and RDFa with per-type validation
- SeoExtractor: runs everything with per-field failure isolation
"""

from .aggregator import SeoExtractor
from .contact import EMAIL_RULE, PHONE_PATTERNS, ContactPattern, get_emails, get_phone_numbers
from .document import PageDocument
from .highlighting import inject_highlight_styles, toggle_link_highlight
from .images import ImageExtractor, parse_srcset
from .links import classify, get_hreflangs, get_links, links_by_type
from .models import (
    ContactPhone,
    HeadingRecord,
    HreflangRecord,
    ImageRecord,
    LinkRecord,
    LinkSummary,
    SeoSnapshot,
    StructuredDataRecord,
)
from .structured_data import SCHEMA_RULES, JsonLdParser, MicrodataParser, RdfaParser, StructuredDataParser
from .urls import resolve

__all__ = [
    # Main extractor
    "SeoExtractor",
    "PageDocument",
    # Producers
    "ImageExtractor",
    "parse_srcset",
    "classify",
    "links_by_type",
    "get_links",
    "get_hreflangs",
    "get_emails",
    "get_phone_numbers",
    "ContactPattern",
    "PHONE_PATTERNS",
    "EMAIL_RULE",
    "StructuredDataParser",
    "JsonLdParser",
    "MicrodataParser",
    "RdfaParser",
    "SCHEMA_RULES",
    "resolve",
    # Highlighting
    "inject_highlight_styles",
    "toggle_link_highlight",
    # Models
    "SeoSnapshot",
    "ImageRecord",
    "LinkRecord",
    "LinkSummary",
    "ContactPhone",
    "StructuredDataRecord",
    "HeadingRecord",
    "HreflangRecord",
]
