"""
Knowledge Model client: one prompt in, free-form text out (Ollama /api/generate).
Transport failures are raised as KnowledgeModelError; callers decide how to degrade.
"""
import logging
from typing import Optional

import requests

from core.config import get_llm_temperature, get_ollama_model, get_ollama_url, LLM_ENRICHMENT_TIMEOUT
from core.errors import KnowledgeModelError

logger = logging.getLogger(__name__)


class OllamaKnowledgeModel:
    def __init__(
        self,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: int = LLM_ENRICHMENT_TIMEOUT,
        temperature: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or get_ollama_url()
        self.model = model or get_ollama_model()
        self.timeout = timeout
        self.temperature = get_llm_temperature() if temperature is None else temperature
        self._session = session or requests.Session()

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        """Return the model's raw response text. Raises KnowledgeModelError."""
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.temperature},
        }
        if system:
            payload["system"] = system
        try:
            resp = self._session.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            logger.warning("LLM_CALL failed model=%s error=%s", self.model, e)
            raise KnowledgeModelError(str(e)) from e
        except ValueError as e:
            logger.warning("LLM_CALL non-JSON envelope model=%s error=%s", self.model, e)
            raise KnowledgeModelError(f"Invalid response envelope: {e}") from e
        text = (body.get("response") or "") if isinstance(body, dict) else ""
        logger.info("LLM_CALL ok model=%s prompt_len=%d response_len=%d", self.model, len(prompt), len(text))
        return text
