"""
Structured results of enrichment and resolution. Single format for the API and the CLI.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from core.models.ingredient import IngredientRecord

MODEL_CALL_FAILURE_MESSAGE = "Failed to get analysis from LLM."
PARSE_FAILURE_MESSAGE = "Failed to parse LLM response as JSON."


class EnrichmentFailureKind(str, Enum):
    MODEL_CALL = "model_call"
    PARSE = "parse"


@dataclass
class EnrichmentSuccess:
    payload: Any
    ok: bool = field(default=True, init=False)

    @property
    def items(self) -> List[Any]:
        """Entries under 'ingredients'; anything else yields an empty list."""
        if isinstance(self.payload, dict) and isinstance(self.payload.get("ingredients"), list):
            return list(self.payload["ingredients"])
        return []

    def to_dict(self) -> Any:
        return self.payload


@dataclass
class EnrichmentFailure:
    kind: EnrichmentFailureKind
    details: str
    raw_response: Optional[str] = None
    attempted_json: Optional[str] = None
    ok: bool = field(default=False, init=False)

    @property
    def message(self) -> str:
        if self.kind == EnrichmentFailureKind.MODEL_CALL:
            return MODEL_CALL_FAILURE_MESSAGE
        return PARSE_FAILURE_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.message, "details": self.details}
        if self.kind == EnrichmentFailureKind.PARSE:
            out["rawResponse"] = self.raw_response
            out["attemptedJsonString"] = self.attempted_json
        return out


EnrichmentResult = Union[EnrichmentSuccess, EnrichmentFailure]


class PersistStatus(str, Enum):
    INSERTED = "inserted"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


@dataclass
class PersistOutcome:
    name: str
    status: PersistStatus
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status.value, "error": self.error}


@dataclass
class ResolutionResult:
    known_terms: List[str] = field(default_factory=list)
    unknown_terms: List[str] = field(default_factory=list)
    records: List[IngredientRecord] = field(default_factory=list)
    enrichment: Optional[EnrichmentResult] = None
    persistence: List[PersistOutcome] = field(default_factory=list)

    @property
    def llm_query_terms(self) -> str:
        return ",".join(self.unknown_terms)

    @property
    def failed_items(self) -> List[PersistOutcome]:
        return [o for o in self.persistence if o.status == PersistStatus.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dbData": [r.to_dict() for r in self.records],
            "llmAnalysis": self.enrichment.to_dict() if self.enrichment is not None else None,
            "llmQueryTerms": self.llm_query_terms,
            "persistence": [o.to_dict() for o in self.persistence],
        }
