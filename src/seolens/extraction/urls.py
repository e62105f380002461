"""
Relative-to-absolute URL resolution.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)


def resolve(candidate: Optional[str], base_uri: str) -> Optional[str]:
    """Resolve ``candidate`` against ``base_uri``.

    ``data:`` URIs pass through unchanged. Anything that cannot be turned into
    an absolute URL yields ``None`` instead of raising.
    """
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate:
        return None
    if candidate[:5].lower() == "data:":
        return candidate

    try:
        resolved = urljoin(base_uri, candidate)
        parts = urlsplit(resolved)
        # raises ValueError on a malformed port
        parts.port
    except ValueError as e:
        logger.debug("Unresolvable URL %r against %r: %s", candidate, base_uri, e)
        return None

    if not parts.scheme:
        return None
    return resolved


def hostname_of(url: Optional[str]) -> str:
    """Lower-cased hostname of ``url`` or an empty string."""
    if not url:
        return ""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""
