"""
Request handling for host integrations.

Two contracts cross the boundary between the engine and its host:

- ``{"action": "getSEOData"}`` returns the full snapshot as a plain dict.
- ``{"action": "toggleHighlight", "linkType": ..., "enabled": ...}`` mutates
  anchor classes and returns nothing. ``toggleNofollow`` is kept as a
  shortcut for ``linkType="nofollow"``.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .config.config import ExtractionSettings
from .exceptions import InvalidRequestError
from .extraction.aggregator import SeoExtractor
from .extraction.document import PageDocument
from .extraction.highlighting import toggle_link_highlight
from .protocols import LinkType

logger = structlog.get_logger(__name__)


class GetDataRequest(BaseModel):
    action: Literal["getSEOData"]


class ToggleHighlightRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Literal["toggleHighlight"]
    link_type: LinkType = Field(alias="linkType")
    enabled: bool


class ToggleNofollowRequest(BaseModel):
    action: Literal["toggleNofollow"]
    enabled: bool = True


Request = Union[GetDataRequest, ToggleHighlightRequest, ToggleNofollowRequest]

_REQUEST_ADAPTER: TypeAdapter[Request] = TypeAdapter(Request)


def parse_request(payload: Mapping[str, Any]) -> Request:
    if not isinstance(payload, Mapping):
        raise InvalidRequestError(f"Request must be a mapping, got {type(payload).__name__}")
    try:
        return _REQUEST_ADAPTER.validate_python(dict(payload))
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid request {payload.get('action')!r}: {e}") from e


def handle_message(
    payload: Mapping[str, Any],
    document: PageDocument,
    settings: Optional[ExtractionSettings] = None,
) -> Optional[Dict[str, Any]]:
    """Dispatch one host request against ``document``."""
    request = parse_request(payload)

    if isinstance(request, GetDataRequest):
        return SeoExtractor(document, settings).extract().to_dict()

    if isinstance(request, ToggleHighlightRequest):
        link_type, enabled = request.link_type, request.enabled
    else:
        link_type, enabled = LinkType.NOFOLLOW, request.enabled

    count = toggle_link_highlight(document, link_type, enabled)
    logger.info("Highlight toggled", link_type=link_type.value, enabled=enabled, links=count)
    return None
