"""
Read-only access to a parsed HTML document.

``PageDocument`` wraps a BeautifulSoup tree together with the page URL and
offers the handful of queries the extractors need: ordered element scans,
attribute reads, inline style lookups and visible text.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, List, Optional

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from ..exceptions import DocumentUnavailableError
from ..protocols import ElementKind
from .urls import hostname_of, resolve

HIDDEN_TEXT_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})

# Elements that start a new line of rendered text; everything else runs inline
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "caption", "dd", "details", "dialog", "div", "dl",
        "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "option", "p", "pre", "section", "summary", "table",
        "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
    }
)

_NON_TEXT_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)

# Semicolons inside url(...) (e.g. ";base64,") do not end a declaration
_STYLE_SPLIT = re.compile(r";(?![^(]*\))")

_TAG_KINDS: Dict[str, ElementKind] = {
    "svg": ElementKind.SVG,
    "img": ElementKind.IMAGE,
    "source": ElementKind.SOURCE,
    "a": ElementKind.ANCHOR,
    "link": ElementKind.LINK,
    "meta": ElementKind.META,
    "time": ElementKind.TIME,
}


class PageDocument:
    """A parsed page plus the location it was loaded from."""

    def __init__(self, soup: BeautifulSoup, url: str) -> None:
        if not isinstance(soup, BeautifulSoup):
            raise DocumentUnavailableError(f"Expected a BeautifulSoup tree, got {type(soup).__name__}")
        self.soup = soup
        self.url = url or ""
        self.hostname = hostname_of(self.url)
        self.base_uri = self._compute_base_uri()

    @classmethod
    def from_html(cls, html: Optional[str | bytes], url: str, parser: str = "html.parser") -> PageDocument:
        """Parse raw HTML into a document."""
        if html is None:
            raise DocumentUnavailableError("No HTML supplied")
        try:
            soup = BeautifulSoup(html, parser)
        except Exception as e:
            # bs4 raises FeatureNotFound for a missing tree builder, plus parser-specific errors
            raise DocumentUnavailableError(f"Could not parse document: {e}") from e
        return cls(soup, url)

    def _compute_base_uri(self) -> str:
        base = self.soup.find("base", href=True)
        if isinstance(base, Tag):
            resolved = resolve(self.attr(base, "href"), self.url)
            if resolved:
                return resolved
        return self.url

    # --- Tree access ---

    def ensure_accessible(self) -> None:
        """Raise ``DocumentUnavailableError`` if the tree can no longer be read."""
        if getattr(self.soup, "decomposed", False):
            raise DocumentUnavailableError("Document tree has been decomposed")

    @property
    def body(self) -> Tag:
        body = self.soup.body
        return body if isinstance(body, Tag) else self.soup

    @property
    def head(self) -> Optional[Tag]:
        head = self.soup.head
        return head if isinstance(head, Tag) else None

    def iter_elements(self, predicate: Optional[Callable[[Tag], bool]] = None) -> Iterator[Tag]:
        """Yield elements in document order, optionally filtered."""
        for element in self.soup.find_all(True):
            if predicate is None or predicate(element):
                yield element

    def find_all(self, name: str | List[str], **attrs: object) -> List[Tag]:
        return [el for el in self.soup.find_all(name, **attrs) if isinstance(el, Tag)]

    def find(self, name: str, **attrs: object) -> Optional[Tag]:
        el = self.soup.find(name, **attrs)
        return el if isinstance(el, Tag) else None

    @property
    def title(self) -> str:
        title = self.soup.title
        if title is None:
            return ""
        return title.get_text().strip()

    # --- Element helpers ---

    @staticmethod
    def attr(element: Tag, name: str) -> Optional[str]:
        """Attribute value as a string; multi-valued attributes are space-joined."""
        value = element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @staticmethod
    def element_kind(element: Tag) -> ElementKind:
        return _TAG_KINDS.get((element.name or "").lower(), ElementKind.OTHER)

    @staticmethod
    def inline_style(element: Tag, prop: str) -> Optional[str]:
        """Value of ``prop`` in the element's inline ``style`` attribute.

        There is no layout engine here, so inline declarations stand in for
        the computed style; the last declaration of a property wins.
        """
        style = element.get("style")
        if not style:
            return None
        if isinstance(style, list):
            style = " ".join(style)
        found: Optional[str] = None
        for declaration in _STYLE_SPLIT.split(style):
            name, sep, value = declaration.partition(":")
            if sep and name.strip().lower() == prop:
                found = value.strip()
        return found

    @staticmethod
    def text_of(element: Tag) -> str:
        """Visible text of one element, whitespace-collapsed."""
        return " ".join(element.get_text(" ").split())

    def visible_text(self) -> str:
        """Text a reader would see in the body.

        Text inside inline elements runs together, so ``<b>info</b>@example.com``
        reads as one word. Block-level elements and ``<br>`` start a new line.
        """
        lines: List[List[str]] = [[]]
        current_block: Optional[Tag] = None
        for node in self.body.descendants:
            if isinstance(node, Tag):
                if node.name == "br" and not self._is_hidden(node):
                    lines.append([])
                continue
            if isinstance(node, _NON_TEXT_STRINGS) or not isinstance(node, NavigableString):
                continue
            if self._is_hidden(node):
                continue
            block = next((parent for parent in node.parents if parent.name in BLOCK_TAGS), None)
            if block is not current_block:
                lines.append([])
                current_block = block
            lines[-1].append(str(node))

        collapsed = (" ".join("".join(line).split()) for line in lines)
        return "\n".join(line for line in collapsed if line)

    @staticmethod
    def _is_hidden(node: Tag | NavigableString) -> bool:
        return any(parent.name in HIDDEN_TEXT_TAGS for parent in node.parents)

    def resolve(self, candidate: Optional[str]) -> Optional[str]:
        return resolve(candidate, self.base_uri)
