"""
Error taxonomy for the ingredient service.
Core modules raise these; core.ingredient_service turns them into response envelopes.
"""
from typing import List, Optional


class IngredientServiceError(Exception):
    """Base class for all service errors."""


class InvalidInput(IngredientServiceError):
    """Malformed or missing request parameters. Client-facing, never retried."""


class ValidationError(IngredientServiceError):
    """A record failed schema constraints. `messages` holds one entry per field problem."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Validation failed.")


class DuplicateKey(IngredientServiceError):
    """Uniqueness violation on the primary identifier."""

    def __init__(self, field: str = "name", value: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for '{field}': {value!r}")


class StorageError(IngredientServiceError):
    """Transport or connectivity fault talking to the document store."""


class KnowledgeModelError(IngredientServiceError):
    """The Knowledge Model call itself failed (network, quota, bad status)."""


class OCRError(IngredientServiceError):
    """Text extraction from an uploaded image failed."""
