"""
Data models for extraction results.

Every record is a frozen dataclass holding only JSON primitives, tuples and
plain dicts, so a ``SeoSnapshot`` never carries references into the parsed
tree and survives a ``json.dumps``/``json.loads`` round trip unchanged.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..protocols import SourceFormat


@dataclass(slots=True, frozen=True)
class ImageRecord:
    """A resolved image candidate."""

    resolved_url: str
    alt_text: str = ""
    source_type: str = "img"
    width: int = 0
    height: int = 0
    title: str = ""
    loading: str = "eager"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ImageRecord:
        return cls(**data)


@dataclass(slots=True, frozen=True)
class LinkRecord:
    """An anchor with its resolved target."""

    display_text: str
    absolute_href: str
    rel: str = ""
    target: str = ""
    hostname: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LinkRecord:
        return cls(**data)


@dataclass(slots=True, frozen=True)
class LinkSummary:
    """Anchors partitioned by host. Special schemes appear in neither list."""

    internal: Tuple[LinkRecord, ...] = ()
    external: Tuple[LinkRecord, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "internal": [link.to_dict() for link in self.internal],
            "external": [link.to_dict() for link in self.external],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LinkSummary:
        return cls(
            internal=tuple(LinkRecord.from_dict(item) for item in data.get("internal", [])),
            external=tuple(LinkRecord.from_dict(item) for item in data.get("external", [])),
        )


@dataclass(slots=True, frozen=True)
class ContactPhone:
    """A harvested phone number; identity is its digits-only form."""

    raw_number: str
    display_text: str

    @property
    def digits(self) -> str:
        return "".join(ch for ch in self.raw_number if ch.isdigit())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ContactPhone:
        return cls(**data)


@dataclass(slots=True, frozen=True)
class StructuredDataRecord:
    """One schema.org item found in the page."""

    source_format: str
    declared_type: str
    is_valid: bool = True
    validation_detail: Tuple[str, ...] = ()
    raw_payload: Any = None

    def __post_init__(self) -> None:
        """Validate the source format."""
        SourceFormat(self.source_format)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_format": self.source_format,
            "declared_type": self.declared_type,
            "is_valid": self.is_valid,
            "validation_detail": list(self.validation_detail),
            "raw_payload": self.raw_payload,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StructuredDataRecord:
        return cls(
            source_format=data["source_format"],
            declared_type=data["declared_type"],
            is_valid=data.get("is_valid", True),
            validation_detail=tuple(data.get("validation_detail", ())),
            raw_payload=data.get("raw_payload"),
        )


@dataclass(slots=True, frozen=True)
class HeadingRecord:
    level: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HeadingRecord:
        return cls(**data)


@dataclass(slots=True, frozen=True)
class HreflangRecord:
    lang: str
    href: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HreflangRecord:
        return cls(**data)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True, frozen=True)
class SeoSnapshot:
    """
    Aggregate root returned by one extraction call.

    Built fresh per call and owned by the caller; the engine keeps no
    reference to it after returning.
    """

    url: str
    title: str = ""
    description: Optional[str] = None
    keywords: Optional[str] = None
    canonical: Optional[str] = None
    robots: Optional[str] = None
    favicon: Optional[str] = None
    og: Dict[str, str] = field(default_factory=dict)
    twitter: Dict[str, str] = field(default_factory=dict)
    headings: Tuple[HeadingRecord, ...] = ()
    images: Tuple[ImageRecord, ...] = ()
    links: LinkSummary = field(default_factory=LinkSummary)
    hreflang: Tuple[HreflangRecord, ...] = ()
    emails: Tuple[str, ...] = ()
    phones: Tuple[ContactPhone, ...] = ()
    schema: Tuple[StructuredDataRecord, ...] = ()
    plugins: Tuple[str, ...] = ()
    paa: Tuple[str, ...] = ()
    captured_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "keywords": self.keywords,
            "canonical": self.canonical,
            "robots": self.robots,
            "favicon": self.favicon,
            "og": dict(self.og),
            "twitter": dict(self.twitter),
            "headings": [heading.to_dict() for heading in self.headings],
            "images": [image.to_dict() for image in self.images],
            "links": self.links.to_dict(),
            "hreflang": [entry.to_dict() for entry in self.hreflang],
            "emails": list(self.emails),
            "phones": [phone.to_dict() for phone in self.phones],
            "schema": [record.to_dict() for record in self.schema],
            "plugins": list(self.plugins),
            "paa": list(self.paa),
            "captured_at": self.captured_at,
        }

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SeoSnapshot:
        return cls(
            url=data["url"],
            title=data.get("title", ""),
            description=data.get("description"),
            keywords=data.get("keywords"),
            canonical=data.get("canonical"),
            robots=data.get("robots"),
            favicon=data.get("favicon"),
            og=dict(data.get("og", {})),
            twitter=dict(data.get("twitter", {})),
            headings=tuple(HeadingRecord.from_dict(item) for item in data.get("headings", [])),
            images=tuple(ImageRecord.from_dict(item) for item in data.get("images", [])),
            links=LinkSummary.from_dict(data.get("links", {})),
            hreflang=tuple(HreflangRecord.from_dict(item) for item in data.get("hreflang", [])),
            emails=tuple(data.get("emails", [])),
            phones=tuple(ContactPhone.from_dict(item) for item in data.get("phones", [])),
            schema=tuple(StructuredDataRecord.from_dict(item) for item in data.get("schema", [])),
            plugins=tuple(data.get("plugins", [])),
            paa=tuple(data.get("paa", [])),
            captured_at=data.get("captured_at") or _utc_now(),
        )

    @classmethod
    def from_json(cls, payload: str) -> SeoSnapshot:
        return cls.from_dict(json.loads(payload))
