"""
Image extraction pipeline.

Every candidate element is run through an ordered list of source strategies
(first match wins), then resolved, deduplicated and filtered:

1. Inline ``<svg>`` serialized to a base64 ``data:`` URI
2. ``srcset`` / ``data-srcset`` best candidate
3. Lazy-loading attributes (``data-src``, ``data-original``, ...)
4. Standard ``src``
5. Inline CSS ``background-image`` then ``data-bg`` / ``data-background``
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

import structlog
from bs4 import Tag

from ..config.config import DEFAULT_LAZY_IMAGE_ATTRIBUTES
from ..protocols import ElementKind
from .document import PageDocument
from .models import ImageRecord

logger = structlog.get_logger(__name__)

_BACKGROUND_URL = re.compile(r"""url\(\s*['"]?(.*?)['"]?\s*\)""", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(?:\.\d*)?|\.\d+)")
_PIXELS = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(?:px)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class SrcsetCandidate:
    url: str
    weight: float


@dataclass(frozen=True)
class ImageSource:
    """Outcome of the strategy chain for one element."""

    src: str
    source_type: str


def _leading_number(text: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(text)
    return float(match.group(1)) if match else None


def parse_srcset(srcset: Optional[str]) -> Optional[str]:
    """Pick the best URL from a ``srcset`` value.

    ``w`` descriptors weigh by width. ``x`` descriptors weigh by
    ``density * 1000``, a rough stand-in for width. Ties keep the first
    candidate.
    """
    if not srcset:
        return None
    candidates: List[SrcsetCandidate] = []
    for entry in srcset.split(","):
        parts = entry.strip().split()
        if not parts:
            continue
        url = parts[0]
        descriptor = parts[1] if len(parts) > 1 else ""
        weight = 0.0
        value = _leading_number(descriptor)
        if value is not None:
            if descriptor.endswith("w"):
                weight = float(int(value))
            elif descriptor.endswith("x"):
                weight = value * 1000
        candidates.append(SrcsetCandidate(url=url, weight=weight))
    if not candidates:
        return None
    # max() returns the first of equal maxima
    return max(candidates, key=lambda candidate: candidate.weight).url


def _dimension(document: PageDocument, element: Tag, name: str) -> Optional[int]:
    """Declared pixel size from the attribute or inline style, None when undeclared."""
    raw = document.attr(element, name)
    if raw is None:
        raw = document.inline_style(element, name)
    if raw is None:
        return None
    match = _PIXELS.match(raw)
    return int(float(match.group(1))) if match else None


_IMAGE_KINDS = frozenset({ElementKind.IMAGE, ElementKind.SOURCE, ElementKind.SVG})


def _is_candidate(element: Tag, kind: ElementKind) -> bool:
    if kind in _IMAGE_KINDS:
        return True
    if (element.get("draggable") or "").lower() == "true":
        return True
    style = element.get("style")
    return bool(style) and "background-image" in str(style).lower()


class ImageExtractor:
    """Collects resolved images from a page in document order."""

    def __init__(
        self,
        document: PageDocument,
        *,
        tiny_threshold: int = 10,
        lazy_attributes: Sequence[str] = tuple(DEFAULT_LAZY_IMAGE_ATTRIBUTES),
    ) -> None:
        self.document = document
        self.tiny_threshold = tiny_threshold
        self.lazy_attributes = tuple(lazy_attributes)

    # --- Strategies ---

    def _from_inline_svg(self, element: Tag, tag: str, kind: ElementKind) -> Optional[ImageSource]:
        if kind is not ElementKind.SVG:
            return None
        try:
            markup = element.decode()
            encoded = base64.b64encode(markup.encode("utf-8")).decode("ascii")
        except (ValueError, UnicodeError, RecursionError) as e:
            logger.debug("Skipping unserializable inline SVG", error=str(e))
            return None
        return ImageSource(src=f"data:image/svg+xml;base64,{encoded}", source_type="svg (inline)")

    def _from_srcset(self, element: Tag, tag: str, kind: ElementKind) -> Optional[ImageSource]:
        srcset = self.document.attr(element, "srcset") or self.document.attr(element, "data-srcset")
        src = parse_srcset(srcset)
        if not src:
            return None
        return ImageSource(src=src, source_type=f"{tag} (srcset)")

    def _from_lazy_attributes(self, element: Tag, tag: str, kind: ElementKind) -> Optional[ImageSource]:
        for attr in self.lazy_attributes:
            value = self.document.attr(element, attr)
            if value:
                return ImageSource(src=value, source_type=f"{tag} (lazy)")
        return None

    def _from_src(self, element: Tag, tag: str, kind: ElementKind) -> Optional[ImageSource]:
        src = self.document.attr(element, "src")
        if not src:
            return None
        return ImageSource(src=src, source_type=tag)

    def _from_background(self, element: Tag, tag: str, kind: ElementKind) -> Optional[ImageSource]:
        background = self.document.inline_style(element, "background-image")
        if background and "url(" in background.lower():
            match = _BACKGROUND_URL.search(background)
            if match and match.group(1):
                return ImageSource(src=match.group(1), source_type="css background")
        data_bg = self.document.attr(element, "data-bg") or self.document.attr(element, "data-background")
        if data_bg:
            return ImageSource(src=data_bg, source_type="data-bg")
        return None

    def resolve_source(self, element: Tag, kind: Optional[ElementKind] = None) -> Optional[ImageSource]:
        """Run the strategy chain for one element."""
        if kind is None:
            kind = self.document.element_kind(element)
        tag = (element.name or "").lower()
        for strategy in (
            self._from_inline_svg,
            self._from_srcset,
            self._from_lazy_attributes,
            self._from_src,
            self._from_background,
        ):
            found = strategy(element, tag, kind)
            if found is not None:
                return found
        return None

    # --- Pipeline ---

    def _alt_and_title(self, element: Tag, kind: ElementKind) -> tuple[str, str]:
        alt = self.document.attr(element, "alt") or ""
        title = self.document.attr(element, "title") or ""
        if kind is ElementKind.SOURCE and not alt:
            parent = element.parent
            sibling_img = parent.find("img") if isinstance(parent, Tag) else None
            if isinstance(sibling_img, Tag):
                alt = self.document.attr(sibling_img, "alt") or ""
                title = self.document.attr(sibling_img, "title") or ""
        return alt, title

    def _is_tiny(self, width: Optional[int], height: Optional[int]) -> bool:
        # Without a layout engine an image with no declared size is not known to be small
        if width is None and height is None:
            return False
        return (width or 0) < self.tiny_threshold and (height or 0) < self.tiny_threshold

    def extract(self) -> List[ImageRecord]:
        images: List[ImageRecord] = []
        seen: Set[str] = set()

        for element in self.document.iter_elements():
            kind = self.document.element_kind(element)
            if not _is_candidate(element, kind):
                continue
            found = self.resolve_source(element, kind)
            if found is None:
                continue

            resolved = self.document.resolve(found.src)
            if not resolved or resolved in seen:
                continue

            width = _dimension(self.document, element, "width")
            height = _dimension(self.document, element, "height")
            is_data_uri = resolved[:5].lower() == "data:"
            if found.source_type == "img" and not is_data_uri and self._is_tiny(width, height):
                logger.debug("Dropping tiny image", url=resolved, width=width, height=height)
                continue

            seen.add(resolved)
            alt, title = self._alt_and_title(element, kind)
            images.append(
                ImageRecord(
                    resolved_url=resolved,
                    alt_text=alt,
                    source_type=found.source_type,
                    width=width or 0,
                    height=height or 0,
                    title=title,
                    loading=self.document.attr(element, "loading") or "eager",
                )
            )

        return images

