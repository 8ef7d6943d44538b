"""
Free-text label analysis: OCR output in, per-ingredient healthy/unhealthy notes out.
Used by the image upload path; independent of the resolution pipeline.
"""
import logging
from typing import Any, Dict

from core.enrichment.enrichment_client import parse_model_json
from core.enrichment.prompts import build_label_analysis_prompt
from core.errors import InvalidInput, KnowledgeModelError

logger = logging.getLogger(__name__)


class LabelAnalyzer:
    def __init__(self, model: Any):
        self.model = model

    def analyze(self, text: str) -> Dict[str, Any]:
        """Raises InvalidInput for empty text, KnowledgeModelError if the call fails or returns non-JSON."""
        if not text or not text.strip():
            raise InvalidInput("No text could be extracted from the image.")
        raw = self.model.generate(build_label_analysis_prompt(text.strip()))
        parsed, _, error = parse_model_json(raw)
        if error is not None:
            logger.warning("LABEL_ANALYSIS parse failed error=%s raw=%s", error, (raw or "")[:200])
            raise KnowledgeModelError(f"Unparseable analysis: {error}")
        logger.info("LABEL_ANALYSIS ok text_len=%d", len(text))
        return parsed
