"""
Persisted ingredient record.
Normalization of name/aliases happens here, before any storage call, so the
lookup invariants hold regardless of what the storage engine coerces.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError
from core.normalization.normalizer import normalize_term, unique_terms


def _as_list(v: Any) -> List[Any]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    if not isinstance(v, (list, tuple, set)):
        raise ValueError("must be a list of strings")
    return list(v)


class IngredientSource(str, Enum):
    LLM = "LLM"
    CURATED = "Curated"
    USER_CONTRIBUTION = "User Contribution"
    DATABASE_IMPORT = "Database Import"
    SCIENTIFIC_LITERATURE = "Scientific Literature"


class IngredientInput(BaseModel):
    """Fields accepted on creation or upsert. Timestamps are assigned by the store."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str
    display_name: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)
    functions: List[str] = Field(default_factory=list)
    health_rating: Optional[int] = Field(default=None, ge=1, le=5)
    rating_rationale: Optional[str] = None
    potential_side_effects: List[str] = Field(default_factory=list)
    source: IngredientSource = IngredientSource.LLM
    source_details: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, v: Any) -> str:
        name = normalize_term(v)
        if not name:
            raise ValueError("Ingredient name is required.")
        return name

    @field_validator("aliases", mode="before")
    @classmethod
    def _normalize_aliases(cls, v: Any) -> List[str]:
        return unique_terms(a for a in (normalize_term(x) for x in _as_list(v)) if a)

    @field_validator("functions", "potential_side_effects", mode="before")
    @classmethod
    def _clean_text_list(cls, v: Any) -> List[str]:
        return [s.strip() for s in _as_list(v) if isinstance(s, str) and s.strip()]

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, v: Any) -> Any:
        return IngredientSource.LLM if v in (None, "") else v

    @model_validator(mode="after")
    def _default_display_name(self) -> "IngredientInput":
        if not self.display_name:
            self.display_name = self.name
        # A record's own name is never stored as an alias of itself.
        self.aliases = [a for a in self.aliases if a != self.name]
        return self

    def to_row(self) -> dict:
        """Row payload for the document store (enum values as plain strings)."""
        return self.model_dump(mode="json")


class IngredientRecord(IngredientInput):
    """A stored ingredient as returned by the repository."""

    id: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


def _format_errors(exc: PydanticValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{loc}: {msg}")
    return messages


def validate_ingredient(payload: Any) -> IngredientInput:
    """Validate a raw mapping (request body, enrichment item). Raises core.errors.ValidationError."""
    if isinstance(payload, IngredientInput):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError(["record: expected an object"])
    try:
        return IngredientInput.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e)) from e
