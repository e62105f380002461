"""
Link classification.

An anchor can belong to several categories at once (an internal link may
also be nofollow). ``javascript:``, ``mailto:`` and ``tel:`` links never
count as internal, external or follow, but stay reachable through the
``mailto``/``tel`` queries.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Set

from bs4 import Tag

from ..protocols import LinkType
from .document import PageDocument
from .models import HreflangRecord, LinkRecord, LinkSummary
from .urls import hostname_of

SPECIAL_SCHEMES = ("javascript:", "mailto:", "tel:")


def _scheme_prefix(document: PageDocument, anchor: Tag) -> str:
    raw = (document.attr(anchor, "href") or "").strip().lower()
    for prefix in SPECIAL_SCHEMES:
        if raw.startswith(prefix):
            return prefix
    return ""


def resolved_href(document: PageDocument, anchor: Tag) -> Optional[str]:
    """Absolute target of ``anchor``; an empty ``href`` points at the page itself."""
    raw = document.attr(anchor, "href") or ""
    if not raw.strip():
        return document.url or None
    return document.resolve(raw)


def rel_tokens(document: PageDocument, anchor: Tag) -> Set[str]:
    return {token.lower() for token in (document.attr(anchor, "rel") or "").split()}


def classify(document: PageDocument, anchor: Tag) -> FrozenSet[LinkType]:
    """All categories ``anchor`` belongs to."""
    categories: Set[LinkType] = set()
    prefix = _scheme_prefix(document, anchor)
    nofollow = "nofollow" in rel_tokens(document, anchor)

    if prefix == "mailto:":
        categories.add(LinkType.MAILTO)
    elif prefix == "tel:":
        categories.add(LinkType.TEL)

    if nofollow:
        categories.add(LinkType.NOFOLLOW)

    if not prefix:
        if not nofollow:
            categories.add(LinkType.FOLLOW)
        host = hostname_of(resolved_href(document, anchor))
        if host and document.hostname and host == document.hostname:
            categories.add(LinkType.INTERNAL)
        elif host:
            categories.add(LinkType.EXTERNAL)

    return frozenset(categories)


def anchors(document: PageDocument) -> List[Tag]:
    return document.find_all("a", href=True)


def links_by_type(document: PageDocument, link_type: LinkType | str) -> List[Tag]:
    """Anchors in ``link_type``, in document order."""
    wanted = LinkType(link_type)
    return [anchor for anchor in anchors(document) if wanted in classify(document, anchor)]


def _record(document: PageDocument, anchor: Tag, href: str) -> LinkRecord:
    return LinkRecord(
        display_text=document.text_of(anchor),
        absolute_href=href,
        rel=document.attr(anchor, "rel") or "",
        target=document.attr(anchor, "target") or "",
        hostname=hostname_of(href),
    )


def get_links(document: PageDocument) -> LinkSummary:
    """Internal and external links for reporting."""
    internal: List[LinkRecord] = []
    external: List[LinkRecord] = []
    for anchor in anchors(document):
        categories = classify(document, anchor)
        if LinkType.INTERNAL not in categories and LinkType.EXTERNAL not in categories:
            continue
        href = resolved_href(document, anchor)
        if href is None:
            continue
        if LinkType.INTERNAL in categories:
            internal.append(_record(document, anchor, href))
        else:
            external.append(_record(document, anchor, href))
    return LinkSummary(internal=tuple(internal), external=tuple(external))


def get_hreflangs(document: PageDocument) -> List[HreflangRecord]:
    records: List[HreflangRecord] = []
    for link in document.find_all("link", hreflang=True):
        if "alternate" not in {token.lower() for token in (document.attr(link, "rel") or "").split()}:
            continue
        records.append(
            HreflangRecord(
                lang=document.attr(link, "hreflang") or "",
                href=document.resolve(document.attr(link, "href")) or (document.attr(link, "href") or ""),
            )
        )
    return records
