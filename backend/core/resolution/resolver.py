"""
Term resolution pipeline:
  validate -> normalize -> existence probe -> partition (known / unknown)
  -> hydrate known -> enrich unknown (one batched call) -> best-effort persist -> merge.

Errors before enrichment (InvalidInput, StorageError) abort the request.
Enrichment and persistence problems are reported inside the ResolutionResult.
"""
import logging
from typing import Any, List, Tuple

from core.config import PRODUCT_CATEGORIES
from core.errors import DuplicateKey, InvalidInput, StorageError, ValidationError
from core.models.ingredient import IngredientSource, validate_ingredient
from core.models.resolution import (
    EnrichmentResult,
    PersistOutcome,
    PersistStatus,
    ResolutionResult,
)
from core.normalization.normalizer import normalize_term, parse_terms, unique_terms

logger = logging.getLogger(__name__)


def validate_category(category: Any) -> str:
    if not isinstance(category, str) or not category.strip():
        raise InvalidInput(
            f'A product category is required in the "category" query parameter ({" or ".join(PRODUCT_CATEGORIES)}).'
        )
    value = category.strip().lower()
    if value not in PRODUCT_CATEGORIES:
        raise InvalidInput(f"Invalid category '{category}'. Must be one of: {', '.join(PRODUCT_CATEGORIES)}.")
    return value


def partition_terms(terms: List[str], identifiers: set) -> Tuple[List[str], List[str]]:
    """Split distinct terms by membership in the probed identifier set. Order is kept."""
    known = [t for t in terms if t in identifiers]
    unknown = [t for t in terms if t not in identifiers]
    return known, unknown


def record_from_enrichment_item(item: Any) -> dict:
    """Map one Knowledge Model entry onto the record schema (validated later)."""
    if not isinstance(item, dict):
        return {"name": None}
    display = item.get("ingredient_name")
    return {
        "name": display,
        "display_name": display.strip() if isinstance(display, str) else None,
        "aliases": item.get("aliases") or [],
        "functions": item.get("functions") or [],
        "health_rating": item.get("health_rating"),
        "rating_rationale": item.get("rating_rationale"),
        "potential_side_effects": item.get("potential_side_effects") or [],
        "source": IngredientSource.LLM.value,
        "source_details": item.get("source_details"),
    }


class IngredientResolver:
    """
    `repository` provides probe_terms, find_by_terms and upsert_if_absent.
    `enrichment_client` provides enrich(terms, category) -> EnrichmentResult.
    Holds no per-request state.
    """

    def __init__(self, repository: Any, enrichment_client: Any):
        self.repository = repository
        self.enrichment_client = enrichment_client

    def resolve(self, raw_terms: Any, category: Any) -> ResolutionResult:
        category = validate_category(category)
        terms = unique_terms(parse_terms(raw_terms))

        identifiers = self.repository.probe_terms(terms)
        known, unknown = partition_terms(terms, identifiers)
        logger.info(
            "RESOLVE_PARTITION category=%s terms=%d known=%s unknown=%s",
            category, len(terms), known, unknown,
        )

        result = ResolutionResult(known_terms=known, unknown_terms=unknown)
        if known:
            result.records = self.repository.find_by_terms(known)

        if unknown:
            result.enrichment = self.enrichment_client.enrich(unknown, category)
            if result.enrichment.ok:
                result.persistence = self.persist_enrichment(result.enrichment)

        logger.info(
            "RESOLVE_DONE known_records=%d enriched=%s persisted=%d failed=%d",
            len(result.records),
            None if result.enrichment is None else result.enrichment.ok,
            sum(1 for o in result.persistence if o.status == PersistStatus.INSERTED),
            len(result.failed_items),
        )
        return result

    def persist_enrichment(self, enrichment: EnrichmentResult) -> List[PersistOutcome]:
        """Upsert-if-absent every enriched item. One item's failure never stops the others."""
        outcomes: List[PersistOutcome] = []
        for item in enrichment.items:
            row = record_from_enrichment_item(item)
            name = normalize_term(row.get("name")) or "<unnamed>"
            try:
                inserted = self.repository.upsert_if_absent(validate_ingredient(row))
            except DuplicateKey:
                logger.info("PERSIST_SKIP name=%s reason=duplicate", name)
                outcomes.append(PersistOutcome(name, PersistStatus.ALREADY_PRESENT))
                continue
            except ValidationError as e:
                logger.warning("PERSIST_FAIL name=%s validation=%s", name, e.messages)
                outcomes.append(PersistOutcome(name, PersistStatus.FAILED, error="; ".join(e.messages)))
                continue
            except StorageError as e:
                logger.error("PERSIST_FAIL name=%s storage=%s", name, e)
                outcomes.append(PersistOutcome(name, PersistStatus.FAILED, error=str(e)))
                continue
            if inserted:
                outcomes.append(PersistOutcome(name, PersistStatus.INSERTED))
            else:
                logger.info("PERSIST_SKIP name=%s reason=already_present", name)
                outcomes.append(PersistOutcome(name, PersistStatus.ALREADY_PRESENT))
        return outcomes
