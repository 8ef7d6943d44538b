"""
Knowledge enrichment: one Knowledge Model call for a batch of unresolved terms.
Never raises; failures come back as tagged EnrichmentFailure values.
"""
import json
import logging
import re
from typing import Any, Iterable, Optional, Tuple

from core.config import PRODUCT_CATEGORIES
from core.enrichment.prompts import build_enrichment_prompt
from core.errors import InvalidInput, KnowledgeModelError
from core.models.resolution import (
    EnrichmentFailure,
    EnrichmentFailureKind,
    EnrichmentResult,
    EnrichmentSuccess,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:[a-zA-Z]+)?\s*([\s\S]*?)\s*```")


def extract_json_text(raw: str) -> str:
    """Contents of the first fenced code block if there is one, else the trimmed response."""
    raw = raw or ""
    match = _FENCE_RE.search(raw)
    if match:
        return match.group(1).strip()
    return raw.strip()


def parse_model_json(raw: str) -> Tuple[Optional[Any], str, Optional[str]]:
    """Returns (parsed, attempted_json, error). `parsed` is None when error is set."""
    attempted = extract_json_text(raw)
    try:
        return json.loads(attempted), attempted, None
    except json.JSONDecodeError as e:
        return None, attempted, str(e)


class EnrichmentClient:
    """`model` is any object with generate(prompt) -> str raising KnowledgeModelError."""

    def __init__(self, model: Any):
        self.model = model

    def enrich(self, terms: Iterable[str], category: str) -> EnrichmentResult:
        terms = list(dict.fromkeys(t for t in terms if t))
        if not terms:
            raise InvalidInput("At least one term is required for enrichment.")
        if category not in PRODUCT_CATEGORIES:
            raise InvalidInput(f"Category must be one of: {', '.join(PRODUCT_CATEGORIES)}.")

        prompt = build_enrichment_prompt(terms, category)
        logger.info("ENRICHMENT_CALL terms=%s category=%s", terms, category)
        try:
            raw = self.model.generate(prompt)
        except KnowledgeModelError as e:
            logger.error("ENRICHMENT_MODEL_FAILURE terms=%d error=%s", len(terms), e)
            return EnrichmentFailure(EnrichmentFailureKind.MODEL_CALL, details=str(e))

        parsed, attempted, error = parse_model_json(raw)
        if error is not None:
            logger.warning("ENRICHMENT_PARSE_FAILURE error=%s raw=%s", error, (raw or "")[:200])
            return EnrichmentFailure(
                EnrichmentFailureKind.PARSE,
                details=error,
                raw_response=raw,
                attempted_json=attempted,
            )
        result = EnrichmentSuccess(parsed)
        logger.info("ENRICHMENT_OK requested=%d returned=%d", len(terms), len(result.items))
        return result
