"""Accent- and case-insensitive text matching for area names and codes."""

import re
import unicodedata

from area_authz.models.area import Area, AreaNode

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: object) -> str:
    """Fold a value for comparison: strip accents, casefold, collapse whitespace.

    ``None`` folds to the empty string.
    """
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped.casefold()).strip()


def area_matches(area: Area | AreaNode, term: str) -> bool:
    """Substring match of an already-normalized ``term`` against name and code."""
    if not term:
        return False
    return term in normalize_text(area.name) or term in normalize_text(area.code)
