"""
Structured Data Parser - JSON-LD, Microdata and RDFa

Extracts schema.org items from a parsed page and checks each declared type
against a small table of required properties. The three syntaxes are parsed
independently; a failure in one never hides the results of the others.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog
from bs4 import Tag

from ..protocols import ElementKind, SourceFormat
from .document import PageDocument
from .models import StructuredDataRecord

logger = structlog.get_logger(__name__)


# ============================================================================
# Validation
# ============================================================================


@dataclass(frozen=True)
class FieldRule:
    """Satisfied when at least one of ``any_of`` is present and non-empty."""

    any_of: Tuple[str, ...]

    @property
    def message(self) -> str:
        if len(self.any_of) == 1:
            return f"Missing required property: {self.any_of[0]}"
        return f"Missing one of: {', '.join(self.any_of)}"

    def check(self, payload: Mapping[str, Any]) -> Optional[str]:
        for name in self.any_of:
            if _has_value(payload.get(name)):
                return None
        return self.message


_ARTICLE_RULES = (
    FieldRule(("headline", "name")),
    FieldRule(("author",)),
    FieldRule(("publisher",)),
    FieldRule(("datePublished",)),
)

SCHEMA_RULES: Dict[str, Tuple[FieldRule, ...]] = {
    "Product": (
        FieldRule(("name",)),
        FieldRule(("offers", "review", "aggregateRating")),
    ),
    "Article": _ARTICLE_RULES,
    "NewsArticle": _ARTICLE_RULES,
    "BlogPosting": _ARTICLE_RULES,
    "BreadcrumbList": (FieldRule(("itemListElement",)),),
    "Organization": (FieldRule(("name",)),),
    "LocalBusiness": (FieldRule(("name",)),),
}


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) > 0
    return True


def _short_type(declared: str) -> str:
    """``https://schema.org/Product`` -> ``Product``; ``schema:Product`` -> ``Product``."""
    declared = declared.strip().rstrip("/")
    for separator in ("/", "#", ":"):
        if separator in declared:
            declared = declared.rsplit(separator, 1)[1]
    return declared


def validate_item(types: Sequence[str], payload: Mapping[str, Any]) -> List[str]:
    """Issues for ``payload`` across every declared type, deduplicated in order."""
    issues: List[str] = []
    for declared in types:
        for rule in SCHEMA_RULES.get(_short_type(declared), ()):
            issue = rule.check(payload)
            if issue and issue not in issues:
                issues.append(issue)
    return issues


def _declared_types(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


# ============================================================================
# JSON-LD
# ============================================================================


class JsonLdParser:
    """Parser for ``<script type="application/ld+json">`` blocks."""

    def __init__(self, snippet_length: int = 200) -> None:
        self.snippet_length = snippet_length

    def parse(self, document: PageDocument) -> List[StructuredDataRecord]:
        records: List[StructuredDataRecord] = []
        for script in document.find_all("script"):
            script_type = (document.attr(script, "type") or "").split(";")[0].strip().lower()
            if script_type != "application/ld+json":
                continue
            text = script.get_text()
            try:
                found = list(self._records_for(json.loads(text)))
            except (ValueError, RecursionError) as e:
                # RecursionError covers nesting too deep to decode or walk
                logger.warning("Invalid JSON-LD block", error=str(e))
                found = [self._error_record(text, e)]
            records.extend(found)
        return records

    def _error_record(self, text: str, error: Exception) -> StructuredDataRecord:
        return StructuredDataRecord(
            source_format=SourceFormat.JSON_LD.value,
            declared_type="JSON-LD",
            is_valid=False,
            validation_detail=(f"Parse error: {error}",),
            raw_payload=text.strip()[: self.snippet_length],
        )

    def _records_for(self, data: Any) -> Iterable[StructuredDataRecord]:
        if isinstance(data, list):
            for member in data:
                yield from self._records_for(member)
            return
        if not isinstance(data, dict):
            logger.debug("Skipping non-object JSON-LD value", value_type=type(data).__name__)
            return

        graph = data.get("@graph")
        if isinstance(graph, list):
            # The graph container itself is not an item
            for member in graph:
                yield from self._records_for(member)
            return

        types = _declared_types(data.get("@type"))
        issues = validate_item(types, data)
        yield StructuredDataRecord(
            source_format=SourceFormat.JSON_LD.value,
            declared_type=", ".join(types) if types else "Unknown",
            is_valid=not issues,
            validation_detail=tuple(issues),
            raw_payload=data,
        )


# ============================================================================
# Microdata
# ============================================================================


def _has_itemscope(element: Tag) -> bool:
    return element.has_attr("itemscope")


def _nearest_scope(element: Tag) -> Optional[Tag]:
    for parent in element.parents:
        if isinstance(parent, Tag) and _has_itemscope(parent):
            return parent
    return None


class MicrodataParser:
    """Recursive parser for ``itemscope``/``itemprop`` annotations."""

    def __init__(self, max_depth: int = 16) -> None:
        self.max_depth = max_depth

    def parse(self, document: PageDocument) -> List[StructuredDataRecord]:
        records: List[StructuredDataRecord] = []
        for element in document.iter_elements(_has_itemscope):
            if _nearest_scope(element) is not None:
                continue
            item = self._parse_item(document, element, depth=0)
            item_type = item.get("type") or ""
            types = [_short_type(value) for value in item_type.split()] if item_type else []
            issues = validate_item(types, item.get("properties", {}))
            records.append(
                StructuredDataRecord(
                    source_format=SourceFormat.MICRODATA.value,
                    declared_type=", ".join(types) if types else "Microdata",
                    is_valid=not issues,
                    validation_detail=tuple(issues),
                    raw_payload=item,
                )
            )
        return records

    def _parse_item(self, document: PageDocument, scope: Tag, depth: int) -> Dict[str, Any]:
        item: Dict[str, Any] = {"type": document.attr(scope, "itemtype") or ""}
        item_id = document.attr(scope, "itemid")
        if item_id:
            item["id"] = item_id

        if depth >= self.max_depth:
            logger.warning("Microdata nesting too deep, truncating", depth=depth, item_type=item["type"])
            item["truncated"] = True
            return item

        properties: Dict[str, Any] = {}
        for element in scope.find_all(attrs={"itemprop": True}):
            # Properties of nested items belong to those items, not to this one
            if _nearest_scope(element) is not scope:
                continue
            names = (document.attr(element, "itemprop") or "").split()
            if not names:
                continue
            value = self._property_value(document, element, depth)
            for name in names:
                if name not in properties:
                    properties[name] = value
                elif isinstance(properties[name], list):
                    properties[name].append(value)
                else:
                    properties[name] = [properties[name], value]

        item["properties"] = properties
        return item

    def _property_value(self, document: PageDocument, element: Tag, depth: int) -> Any:
        if _has_itemscope(element):
            return self._parse_item(document, element, depth + 1)

        kind = document.element_kind(element)
        if kind is ElementKind.META:
            return document.attr(element, "content") or ""
        if kind in (ElementKind.IMAGE, ElementKind.SOURCE):
            return self._url_value(document, element, "src")
        if kind in (ElementKind.ANCHOR, ElementKind.LINK):
            return self._url_value(document, element, "href")
        if kind is ElementKind.TIME:
            return document.attr(element, "datetime") or document.text_of(element)
        if element.has_attr("content"):
            return document.attr(element, "content") or ""
        return document.text_of(element)

    @staticmethod
    def _url_value(document: PageDocument, element: Tag, attr: str) -> str:
        raw = document.attr(element, attr) or ""
        return document.resolve(raw) or raw


# ============================================================================
# RDFa
# ============================================================================


def _has_rdfa_root(element: Tag) -> bool:
    return element.has_attr("vocab") or element.has_attr("typeof")


class RdfaParser:
    """Shallow RDFa detection: top-level ``vocab``/``typeof`` elements only."""

    def __init__(self, snippet_length: int = 200) -> None:
        self.snippet_length = snippet_length

    def parse(self, document: PageDocument) -> List[StructuredDataRecord]:
        records: List[StructuredDataRecord] = []
        for element in document.iter_elements(_has_rdfa_root):
            if any(isinstance(parent, Tag) and _has_rdfa_root(parent) for parent in element.parents):
                continue
            vocab = document.attr(element, "vocab") or ""
            type_of = document.attr(element, "typeof") or ""
            records.append(
                StructuredDataRecord(
                    source_format=SourceFormat.RDFA.value,
                    declared_type=type_of or "RDFa",
                    is_valid=True,
                    raw_payload={
                        "vocab": vocab,
                        "typeof": type_of,
                        "html": element.decode()[: self.snippet_length],
                    },
                )
            )
        return records


# ============================================================================
# Coordinator
# ============================================================================


class StructuredDataParser:
    """
    Runs the JSON-LD, Microdata and RDFa parsers in that order.

    Each parser is isolated: if one raises, its records are replaced by
    nothing and the others still contribute.
    """

    def __init__(self, *, snippet_length: int = 200, microdata_max_depth: int = 16) -> None:
        self.json_ld_parser = JsonLdParser(snippet_length=snippet_length)
        self.microdata_parser = MicrodataParser(max_depth=microdata_max_depth)
        self.rdfa_parser = RdfaParser(snippet_length=snippet_length)

    def parse_all(self, document: PageDocument) -> List[StructuredDataRecord]:
        records: List[StructuredDataRecord] = []
        for name, parser in (
            ("json-ld", self.json_ld_parser),
            ("microdata", self.microdata_parser),
            ("rdfa", self.rdfa_parser),
        ):
            try:
                records.extend(parser.parse(document))
            except Exception:
                logger.warning("Structured data parser failed", parser=name, exc_info=True)
        return records
