"""
Contact extraction: email addresses and phone numbers.

Emails and each phone family are named rules, each pairing a regex with a
digit-count predicate, so every rule can be tested on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Set, Tuple
from urllib.parse import unquote

import structlog

from .document import PageDocument
from .models import ContactPhone

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ContactPattern:
    """A named regex plus the digit-count check its matches must pass."""

    name: str
    pattern: re.Pattern[str]
    digit_predicate: Callable[[int], bool]

    def matches(self, text: str) -> Iterable[str]:
        for match in self.pattern.finditer(text):
            candidate = match.group(0).strip()
            if self.digit_predicate(len(digits_only(candidate))):
                yield candidate


EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Email matches carry no digit constraint
EMAIL_RULE = ContactPattern(name="email", pattern=EMAIL_PATTERN, digit_predicate=lambda count: True)

PHONE_PATTERNS: Tuple[ContactPattern, ...] = (
    ContactPattern(
        name="international",
        pattern=re.compile(r"\+\d{1,3}(?:[\s.-]?\d{2,4}){2,5}"),
        digit_predicate=lambda count: 10 <= count <= 15,
    ),
    ContactPattern(
        name="parenthesized",
        pattern=re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"),
        digit_predicate=lambda count: count == 10,
    ),
    # The pattern already fixes the digit count
    ContactPattern(
        name="plain",
        pattern=re.compile(r"\b\d{3}[\s.-]\d{3}[\s.-]\d{4}\b"),
        digit_predicate=lambda count: True,
    ),
)


def digits_only(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


def is_valid_email(value: str) -> bool:
    return EMAIL_RULE.pattern.fullmatch(value) is not None


def _mailto_address(href: str) -> str:
    address = href.strip()[len("mailto:") :]
    return unquote(address.split("?", 1)[0]).strip()


def get_emails(document: PageDocument) -> List[str]:
    """Lower-cased, deduplicated, sorted addresses from links, text and meta tags."""
    emails: Set[str] = set()

    for anchor in document.find_all("a", href=True):
        href = document.attr(anchor, "href") or ""
        if not href.strip().lower().startswith("mailto:"):
            continue
        address = _mailto_address(href)
        if address and is_valid_email(address):
            emails.add(address.lower())
        elif address:
            logger.debug("Ignoring malformed mailto address", address=address)

    emails.update(match.lower() for match in EMAIL_RULE.matches(document.visible_text()))

    for meta in document.find_all("meta", content=True):
        content = document.attr(meta, "content") or ""
        if "@" in content:
            emails.update(match.lower() for match in EMAIL_RULE.matches(content))

    return sorted(emails)


def get_phone_numbers(document: PageDocument, limit: int = 50) -> List[ContactPhone]:
    """Phones from ``tel:`` links and visible text, deduplicated by digits.

    ``tel:`` links are trusted as-is; text matches must pass their family's
    digit-count check. The first formatting seen for a number wins.
    """
    candidates: List[ContactPhone] = []

    for anchor in document.find_all("a", href=True):
        href = (document.attr(anchor, "href") or "").strip()
        if not href.lower().startswith("tel:"):
            continue
        number = unquote(href[len("tel:") :]).strip()
        if number:
            candidates.append(ContactPhone(raw_number=number, display_text=document.text_of(anchor) or number))

    text = document.visible_text()
    for rule in PHONE_PATTERNS:
        for match in rule.matches(text):
            candidates.append(ContactPhone(raw_number=match, display_text=match))

    phones: List[ContactPhone] = []
    seen: Set[str] = set()
    for phone in candidates:
        key = phone.digits
        if key in seen:
            continue
        seen.add(key)
        phones.append(phone)

    return phones[:limit]
