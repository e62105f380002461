"""
Shared enums for the SeoLens extraction engine.

These are the small contracts every extractor agrees on: which link
categories exist, which structured-data formats are reported and how an
element is classified before a sub-extractor dispatches on it.
"""

from __future__ import annotations

from enum import Enum


class LinkType(str, Enum):
    """Link categories used for reporting and highlight toggling."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    NOFOLLOW = "nofollow"
    FOLLOW = "follow"
    MAILTO = "mailto"
    TEL = "tel"


class SourceFormat(str, Enum):
    """Structured-data syntaxes recognised by the engine."""

    JSON_LD = "json-ld"
    MICRODATA = "microdata"
    RDFA = "rdfa"


class ElementKind(Enum):
    """Element classification resolved once per element before dispatch."""

    SVG = "svg"
    IMAGE = "img"
    SOURCE = "source"
    ANCHOR = "a"
    LINK = "link"
    META = "meta"
    TIME = "time"
    OTHER = "other"
