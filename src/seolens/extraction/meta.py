"""
Meta tags, social cards, headings and other page-level scalars.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from bs4 import Tag

from .document import PageDocument
from .models import HeadingRecord

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")

# (plugin name, generator substring, asset URL substrings)
SEO_PLUGIN_SIGNATURES = (
    ("Yoast SEO", "Yoast", ("yoast",)),
    ("Rank Math", "Rank Math", ("rank-math",)),
    ("All in One SEO", "All in One SEO", ("all-in-one-seo",)),
    ("SEOPress", "SEOPress", ("seopress",)),
    ("The SEO Framework", "The SEO Framework", ()),
)

PAA_CLASSES = ("related-question-pair", "related-question")


def get_meta_content(document: PageDocument, name: str) -> Optional[str]:
    """``content`` of the first ``<meta name=...>``, else ``<meta property=...>``."""
    for attr in ("name", "property"):
        for meta in document.find_all("meta", attrs={attr: True}):
            if (document.attr(meta, attr) or "").strip().lower() == name.lower():
                return document.attr(meta, "content")
    return None


def _prefixed_tags(document: PageDocument, prefix: str, attrs: tuple[str, str]) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for meta in document.find_all("meta"):
        key = document.attr(meta, attrs[0]) or document.attr(meta, attrs[1]) or ""
        if not key.lower().startswith(prefix):
            continue
        prop = key[len(prefix) :]
        content = document.attr(meta, "content")
        if prop and content:
            tags[prop] = content
    return tags


def get_og_tags(document: PageDocument) -> Dict[str, str]:
    return _prefixed_tags(document, "og:", ("property", "name"))


def get_twitter_tags(document: PageDocument) -> Dict[str, str]:
    return _prefixed_tags(document, "twitter:", ("name", "property"))


def get_canonical(document: PageDocument) -> Optional[str]:
    for link in document.find_all("link", href=True):
        if "canonical" in (document.attr(link, "rel") or "").lower().split():
            return document.resolve(document.attr(link, "href"))
    return None


def get_favicon(document: PageDocument) -> Optional[str]:
    links = document.find_all("link", href=True)
    for rel in FAVICON_RELS:
        for link in links:
            if " ".join((document.attr(link, "rel") or "").lower().split()) == rel:
                href = document.resolve(document.attr(link, "href"))
                if href:
                    return href
    return document.resolve("/favicon.ico")


def get_headings(document: PageDocument, max_length: int = 100) -> List[HeadingRecord]:
    headings: List[HeadingRecord] = []
    for heading in document.find_all(HEADING_TAGS):
        headings.append(
            HeadingRecord(
                level=int(heading.name[1]),
                text=document.text_of(heading)[:max_length],
            )
        )
    return headings


def _any_asset_contains(document: PageDocument, needles: tuple[str, ...]) -> bool:
    if not needles:
        return False
    for element in document.find_all(["script", "link"]):
        url = (document.attr(element, "src") or document.attr(element, "href") or "").lower()
        if any(needle in url for needle in needles):
            return True
    return False


def get_seo_plugins(document: PageDocument) -> List[str]:
    generators = [
        document.attr(meta, "content") or ""
        for meta in document.find_all("meta", attrs={"name": re.compile(r"^generator$", re.I)})
    ]
    plugins: List[str] = []
    for name, generator, assets in SEO_PLUGIN_SIGNATURES:
        if any(generator in content for content in generators) or _any_asset_contains(document, assets):
            plugins.append(name)
    return plugins


def _is_paa_element(element: Tag) -> bool:
    if element.has_attr("data-q"):
        return True
    classes = element.get("class") or []
    return any(name in PAA_CLASSES for name in classes)


def get_paa(document: PageDocument) -> List[str]:
    """People-Also-Ask questions (search result pages only)."""
    questions: List[str] = []
    for element in document.iter_elements(_is_paa_element):
        text = element.get_text().strip()
        if text and len(text) < 200 and "?" in text:
            questions.append(text)
    return questions
