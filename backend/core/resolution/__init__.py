"""
Known/unknown term resolution with LLM enrichment.
"""
from .resolver import IngredientResolver, partition_terms, record_from_enrichment_item, validate_category

__all__ = [
    "IngredientResolver",
    "partition_terms",
    "record_from_enrichment_item",
    "validate_category",
]
