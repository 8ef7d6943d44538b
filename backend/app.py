"""
Ingredient Insight FastAPI application.

Endpoints:
    GET  /                                  Health check
    POST /analyze                           OCR -> LLM label analysis
    POST /api/ingredients                   Create an ingredient record
    GET  /api/ingredients/search            Search records by name or alias (?terms=a,b,c)
    GET  /api/ingredients/lookup            Single name-or-alias lookup (?term=a)
    GET  /api/ingredients/process-list      Resolve known terms, enrich unknown ones (?terms=&category=)
"""
from fastapi import Body, Depends, FastAPI, File, UploadFile
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from functools import lru_cache
from typing import Any, Optional
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load env vars (before core.config reads timeouts)
load_dotenv(Path(__file__).parent / ".env")

from core.config import get_cors_allow_origins, log_config, LLM_ANALYSIS_TIMEOUT, LLM_ENRICHMENT_TIMEOUT
from core.enrichment import EnrichmentClient
from core.errors import IngredientServiceError
from core.ingredient_service import IngredientService
from core.label_analysis import LabelAnalyzer
from core.llm_client import OllamaKnowledgeModel
from core.resolution import IngredientResolver
from core.storage import IngredientRepository, create_supabase_client
from ocr_engine import OCREngine

# Initialize App
app = FastAPI(title="Ingredient Insight API")

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Dependencies (overridable via app.dependency_overrides) ---

@lru_cache(maxsize=1)
def get_repository() -> IngredientRepository:
    return IngredientRepository(create_supabase_client())


@lru_cache(maxsize=1)
def get_enrichment_model() -> OllamaKnowledgeModel:
    return OllamaKnowledgeModel(timeout=LLM_ENRICHMENT_TIMEOUT)


@lru_cache(maxsize=1)
def get_analysis_model() -> OllamaKnowledgeModel:
    return OllamaKnowledgeModel(timeout=LLM_ANALYSIS_TIMEOUT, temperature=0.7)


@lru_cache(maxsize=1)
def get_ocr_engine() -> OCREngine:
    return OCREngine()


def get_ingredient_service(
    repository=Depends(get_repository),
    model=Depends(get_enrichment_model),
) -> IngredientService:
    return IngredientService(repository, IngredientResolver(repository, EnrichmentClient(model)))


def _respond(result) -> JSONResponse:
    status_code, body = result
    return JSONResponse(status_code=status_code, content=body)


ANALYZE_PATH = "/analyze"
ANALYZE_ERROR = {"error": "Something went wrong during processing."}


@app.exception_handler(IngredientServiceError)
async def _service_error_handler(request, exc: IngredientServiceError):
    # Reached when a dependency cannot be built, e.g. the store is not configured or OCR is not installed
    logger.error("Request failed path=%s error=%s", request.url.path, exc)
    if request.url.path == ANALYZE_PATH:
        return JSONResponse(status_code=500, content=ANALYZE_ERROR)
    return JSONResponse(status_code=500, content={"success": False, "message": "Service unavailable."})


# --- Endpoints ---

@app.get("/")
def health_check():
    return {"status": "ok", "service": "Ingredient Insight API"}


@app.post("/api/ingredients")
def create_ingredient(payload: Any = Body(...), service: IngredientService = Depends(get_ingredient_service)):
    return _respond(service.create_ingredient(payload))


@app.get("/api/ingredients/search")
def search_ingredients(terms: Optional[str] = None, service: IngredientService = Depends(get_ingredient_service)):
    logger.info("Search request terms=%s", terms)
    return _respond(service.search_ingredients(terms))


@app.get("/api/ingredients/lookup")
def lookup_ingredient(term: Optional[str] = None, service: IngredientService = Depends(get_ingredient_service)):
    return _respond(service.lookup_ingredient(term))


@app.get("/api/ingredients/process-list")
def process_list(
    terms: Optional[str] = None,
    category: Optional[str] = None,
    service: IngredientService = Depends(get_ingredient_service),
):
    """Known terms come from the store; unknown terms are enriched in one LLM call and persisted best-effort."""
    logger.info("Process-list request terms=%s category=%s", terms, category)
    return _respond(service.process_list(terms, category))


@app.post(ANALYZE_PATH)
def analyze_label(
    file: UploadFile = File(...),
    ocr_engine=Depends(get_ocr_engine),
    model=Depends(get_analysis_model),
):
    """OCR the uploaded image, then ask the model for a per-ingredient health analysis."""
    logger.info("Analyze request filename=%s", file.filename)
    try:
        image_bytes = file.file.read()
        extracted_text = ocr_engine.extract_text(image_bytes)
        logger.info("OCR extracted %d chars", len(extracted_text))
        analysis = LabelAnalyzer(model).analyze(extracted_text)
    except IngredientServiceError as e:
        logger.error("Analyze failed: %s", e, exc_info=True)
        return JSONResponse(status_code=500, content=ANALYZE_ERROR)
    return {"extractedText": extracted_text, "analysis": analysis}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
