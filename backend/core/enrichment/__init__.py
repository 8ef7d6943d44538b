"""
Knowledge enrichment: prompt construction, model call, JSON extraction.
"""
from .enrichment_client import EnrichmentClient, extract_json_text, parse_model_json
from .prompts import build_enrichment_prompt, build_label_analysis_prompt

__all__ = [
    "EnrichmentClient",
    "extract_json_text",
    "parse_model_json",
    "build_enrichment_prompt",
    "build_label_analysis_prompt",
]
