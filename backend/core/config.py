"""
Paths and centralized configuration.
All values are read lazily from the environment so tests can patch them.
"""
import os
import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

# Repo root: backend/core/config.py -> parent=core, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

PRODUCT_CATEGORIES = ("cosmetic", "food")


def get_schema_path() -> Path:
    return _BACKEND_DIR / "sql" / "ingredients.sql"


# --- Document store (Supabase) ---
def get_supabase_url() -> str:
    return os.environ.get("SUPABASE_URL", "").strip()


def get_supabase_key() -> str:
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY") or os.environ.get("SUPABASE_ANON_KEY") or ""
    return key.strip()


def get_ingredients_table() -> str:
    return os.environ.get("INGREDIENTS_TABLE", "ingredients").strip() or "ingredients"


# --- LLM / Ollama ---
def get_ollama_url() -> str:
    return os.environ.get("OLLAMA_API_URL", "http://localhost:11434/api/generate")


def get_ollama_model() -> str:
    return os.environ.get("OLLAMA_MODEL", "llama3.2:3b")


def get_llm_temperature() -> float:
    return float(os.environ.get("LLM_TEMPERATURE", "0.2"))


# LLM timeout defaults (seconds)
LLM_ENRICHMENT_TIMEOUT = int(os.environ.get("LLM_ENRICHMENT_TIMEOUT", "120"))
LLM_ANALYSIS_TIMEOUT = int(os.environ.get("LLM_ANALYSIS_TIMEOUT", "120"))


# --- HTTP / OCR ---
def get_cors_allow_origins() -> List[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def get_ocr_lang() -> str:
    return os.environ.get("OCR_LANG", "en")


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: supabase_url_set=%s supabase_key_set=%s table=%s schema=%s "
        "ollama_model=%s llm_temperature=%s llm_enrichment_timeout=%ds llm_analysis_timeout=%ds ocr_lang=%s",
        bool(get_supabase_url()), bool(get_supabase_key()), get_ingredients_table(),
        get_schema_path().exists(), get_ollama_model(), get_llm_temperature(),
        LLM_ENRICHMENT_TIMEOUT, LLM_ANALYSIS_TIMEOUT, get_ocr_lang(),
    )
