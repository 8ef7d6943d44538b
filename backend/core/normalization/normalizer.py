"""
Deterministic normalization only. No LLM, no fuzzy matching.
Turns human-entered ingredient identifiers into canonical lookup keys.
"""
import re
import logging
from typing import Any, Iterable, List

from core.errors import InvalidInput

logger = logging.getLogger(__name__)

_BRACKETS_RE = re.compile(r"[()\[\]{}]")


def normalize_term(text: Any) -> str:
    """
    Normalize a single identifier for lookup.
    - Lowercase, remove ( ) [ ] { } anywhere, trim.
    - Non-strings normalize to "".
    """
    if not isinstance(text, str):
        return ""
    return _BRACKETS_RE.sub("", text.lower()).strip()


def parse_terms(raw: Any) -> List[str]:
    """
    Split a comma-separated string into normalized, non-empty terms.
    Order is kept and duplicates are allowed; see unique_terms().
    Raises InvalidInput when nothing usable remains.
    """
    if raw is None or not isinstance(raw, str) or not raw.strip():
        raise InvalidInput(
            'Search term(s) are required as a non-empty, comma-separated string in the "terms" query parameter.'
        )
    terms = [normalize_term(part) for part in raw.split(",")]
    terms = [t for t in terms if t]
    if not terms:
        raise InvalidInput("Please provide at least one valid search term.")
    logger.debug("NORMALIZE raw_len=%d terms=%s", len(raw), terms)
    return terms


def unique_terms(terms: Iterable[str]) -> List[str]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(terms))
