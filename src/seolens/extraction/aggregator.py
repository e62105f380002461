"""
SeoExtractor - runs every field extractor and assembles a SeoSnapshot.

Each field is computed through an isolating wrapper: an exception is logged
and replaced by an empty value of the right type, so a single misbehaving
extractor only blanks its own field. The one failure that is not contained
is an unreadable document, which aborts the whole call.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

import structlog

from ..config.config import ExtractionSettings
from .contact import get_emails, get_phone_numbers
from .document import PageDocument
from .images import ImageExtractor
from .links import get_hreflangs, get_links
from .meta import (
    get_canonical,
    get_favicon,
    get_headings,
    get_meta_content,
    get_og_tags,
    get_paa,
    get_seo_plugins,
    get_twitter_tags,
)
from .models import LinkSummary, SeoSnapshot
from .structured_data import StructuredDataParser

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SeoExtractor:
    """
    Extracts a SeoSnapshot from one document.

    Holds no state between calls; every ``extract()`` builds its dedup sets
    and result objects from scratch.
    """

    def __init__(self, document: PageDocument, settings: Optional[ExtractionSettings] = None) -> None:
        self.document = document
        self.settings = settings or ExtractionSettings()
        self.logger = logger.bind(component="SeoExtractor")

    @classmethod
    def from_html(cls, html: str | bytes, url: str, settings: Optional[ExtractionSettings] = None) -> SeoExtractor:
        settings = settings or ExtractionSettings()
        return cls(PageDocument.from_html(html, url, parser=settings.parser), settings)

    def _safe(self, field: str, fn: Callable[[], T], fallback: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as e:
            self.logger.warning("Field extraction failed", field=field, error=str(e), exc_info=True)
            return fallback()

    def extract(self) -> SeoSnapshot:
        """Build a snapshot of the page.

        Raises:
            DocumentUnavailableError: if the document tree cannot be read.
        """
        self.document.ensure_accessible()
        doc = self.document
        settings = self.settings
        structured = StructuredDataParser(
            snippet_length=settings.snippet_length,
            microdata_max_depth=settings.microdata_max_depth,
        )
        images = ImageExtractor(
            doc,
            tiny_threshold=settings.tiny_image_threshold,
            lazy_attributes=settings.lazy_image_attributes,
        )

        with structlog.contextvars.bound_contextvars(page_url=doc.url):
            snapshot = SeoSnapshot(
                url=doc.url,
                title=self._safe("title", lambda: doc.title, str),
                description=self._safe("description", lambda: get_meta_content(doc, "description"), lambda: None),
                keywords=self._safe("keywords", lambda: get_meta_content(doc, "keywords"), lambda: None),
                canonical=self._safe("canonical", lambda: get_canonical(doc), lambda: None),
                robots=self._safe("robots", lambda: get_meta_content(doc, "robots"), lambda: None),
                favicon=self._safe("favicon", lambda: get_favicon(doc), lambda: None),
                og=self._safe("og", lambda: get_og_tags(doc), dict),
                twitter=self._safe("twitter", lambda: get_twitter_tags(doc), dict),
                headings=self._safe(
                    "headings", lambda: tuple(get_headings(doc, settings.heading_max_length)), tuple
                ),
                images=self._safe("images", lambda: tuple(images.extract()), tuple),
                links=self._safe("links", lambda: get_links(doc), LinkSummary),
                hreflang=self._safe("hreflang", lambda: tuple(get_hreflangs(doc)), tuple),
                emails=self._safe("emails", lambda: tuple(get_emails(doc)), tuple),
                phones=self._safe(
                    "phones", lambda: tuple(get_phone_numbers(doc, settings.max_phone_results)), tuple
                ),
                schema=self._safe("schema", lambda: tuple(structured.parse_all(doc)), tuple),
                plugins=self._safe("plugins", lambda: tuple(get_seo_plugins(doc)), tuple),
                paa=self._safe("paa", lambda: tuple(get_paa(doc)), tuple),
            )

        self.logger.debug(
            "Extraction complete",
            url=doc.url,
            images=len(snapshot.images),
            links=len(snapshot.links.internal) + len(snapshot.links.external),
            schema=len(snapshot.schema),
        )
        return snapshot
