"""
Link highlighting.

The only place the engine writes to the document: CSS classes on anchors,
plus one ``<style>`` element that the host injects once before toggling.
"""

from __future__ import annotations

from typing import List

import structlog
from bs4 import Tag

from ..protocols import LinkType
from .document import PageDocument
from .links import links_by_type

logger = structlog.get_logger(__name__)

STYLE_ELEMENT_ID = "seo-analyzer-highlight-styles"

HIGHLIGHT_COLORS = {
    LinkType.NOFOLLOW: ("dashed", "#ff6b6b", "255, 107, 107"),
    LinkType.FOLLOW: ("solid", "#51cf66", "81, 207, 102"),
    LinkType.EXTERNAL: ("solid", "#339af0", "51, 154, 240"),
    LinkType.INTERNAL: ("solid", "#ffd43b", "255, 212, 59"),
    LinkType.MAILTO: ("solid", "#ff6b9d", "255, 107, 157"),
    LinkType.TEL: ("solid", "#9775fa", "151, 117, 250"),
}


def highlight_class(link_type: LinkType | str) -> str:
    return f"seo-highlight-{LinkType(link_type).value}"


def highlight_stylesheet() -> str:
    rules: List[str] = []
    for link_type, (line, color, rgb) in HIGHLIGHT_COLORS.items():
        rules.append(
            f"a.{highlight_class(link_type)} {{\n"
            f"    outline: 2px {line} {color} !important;\n"
            f"    outline-offset: 2px !important;\n"
            f"    background-color: rgba({rgb}, 0.1) !important;\n"
            f"}}"
        )
    return "\n".join(rules)


def inject_highlight_styles(document: PageDocument) -> bool:
    """Insert the highlight stylesheet once. Returns True if it was added."""
    soup = document.soup
    if soup.find(id=STYLE_ELEMENT_ID) is not None:
        return False
    style = soup.new_tag("style", id=STYLE_ELEMENT_ID)
    style.string = highlight_stylesheet()
    target = document.head or document.body
    target.append(style)
    return True


def _class_list(anchor: Tag) -> List[str]:
    classes = anchor.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def toggle_link_highlight(document: PageDocument, link_type: LinkType | str, enabled: bool) -> int:
    """Add or remove the highlight class on every link of ``link_type``.

    Enabling twice never duplicates the class; disabling removes every
    occurrence. Returns the number of anchors touched.
    """
    class_name = highlight_class(link_type)
    targets = links_by_type(document, link_type)
    for anchor in targets:
        classes = [name for name in _class_list(anchor) if name != class_name]
        if enabled:
            classes.append(class_name)
        if classes:
            anchor["class"] = classes
        elif anchor.has_attr("class"):
            del anchor["class"]
    logger.debug("Toggled link highlight", link_type=LinkType(link_type).value, enabled=enabled, count=len(targets))
    return len(targets)
