"""
Exception hierarchy for SeoLens.

Only failures the caller must act on are raised out of the engine; everything
else (bad URLs, broken JSON-LD, unserializable SVG) is recovered where it occurs.
"""

from __future__ import annotations


class SeoLensError(Exception):
    """Base class for all SeoLens errors."""


class DocumentUnavailableError(SeoLensError):
    """The host document tree cannot be accessed; extraction cannot start."""


class InvalidRequestError(SeoLensError, ValueError):
    """A messaging request has an unknown action or malformed payload."""
