"""
Document store access: Supabase client and the ingredient repository.
"""
from .client import create_supabase_client
from .ingredient_repository import IngredientRepository, PROBE_COLUMNS, terms_filter

__all__ = [
    "create_supabase_client",
    "IngredientRepository",
    "PROBE_COLUMNS",
    "terms_filter",
]
