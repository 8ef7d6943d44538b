"""
Shared test doubles: an in-memory ingredient store with atomic insert-if-absent,
and a scripted Knowledge Model.
"""
import json
import threading

import pytest

from core.errors import DuplicateKey, KnowledgeModelError
from core.models.ingredient import IngredientRecord, validate_ingredient


class InMemoryIngredientRepository:
    def __init__(self, records=None):
        self._rows = {}
        self._lock = threading.Lock()
        self.probe_calls = []
        self.find_calls = []
        for r in records or []:
            self.create(r)

    def _matches(self, row, terms):
        return row["name"] in terms or any(a in terms for a in row["aliases"])

    def probe_terms(self, terms):
        terms = set(terms)
        self.probe_calls.append(terms)
        identifiers = set()
        for row in list(self._rows.values()):
            if self._matches(row, terms):
                identifiers.add(row["name"])
                identifiers.update(row["aliases"])
        return identifiers

    def find_by_terms(self, terms):
        terms = set(terms or [])
        self.find_calls.append(terms)
        return [IngredientRecord.model_validate(r) for r in self._rows.values() if self._matches(r, terms)]

    def find_by_name_or_alias(self, term):
        matches = self.find_by_terms([term])
        return matches[0] if matches else None

    def create(self, record):
        ingredient = validate_ingredient(record)
        with self._lock:
            if ingredient.name in self._rows:
                raise DuplicateKey("name", ingredient.name)
            self._rows[ingredient.name] = ingredient.to_row()
        return IngredientRecord.model_validate(self._rows[ingredient.name])

    def upsert_if_absent(self, record):
        ingredient = validate_ingredient(record)
        with self._lock:
            if ingredient.name in self._rows:
                return False
            self._rows[ingredient.name] = ingredient.to_row()
            return True

    def names(self):
        return sorted(self._rows)

    def __len__(self):
        return len(self._rows)


class ScriptedModel:
    """generate() returns queued responses in order; Exception instances are raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []
        self._lock = threading.Lock()

    def generate(self, prompt, system=None):
        with self._lock:
            self.prompts.append(prompt)
            response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self):
        return len(self.prompts)


def enrichment_response(*names, fenced=True, **overrides):
    items = []
    for name in names:
        item = {
            "ingredient_name": name,
            "aliases": [],
            "functions": ["Humectant"],
            "health_rating": 4,
            "rating_rationale": "Generally regarded as safe.",
            "potential_side_effects": [],
            "source": "LLM",
            "source_details": "test-model",
        }
        item.update(overrides)
        items.append(item)
    body = json.dumps({"ingredients": items})
    return f"Here you go:\n```json\n{body}\n```" if fenced else body


@pytest.fixture
def seeded_repository():
    return InMemoryIngredientRepository([
        {"name": "water", "display_name": "Water", "aliases": ["aqua"], "health_rating": 5, "source": "Curated"},
        {"name": "glycerin", "display_name": "Glycerin", "aliases": ["glycerol"], "health_rating": 5},
        {"name": "parfum", "display_name": "Parfum", "aliases": ["fragrance"], "health_rating": 2},
    ])


@pytest.fixture
def model_error():
    return KnowledgeModelError("quota exceeded")


@pytest.fixture
def make_model():
    return ScriptedModel


@pytest.fixture
def make_repository():
    return InMemoryIngredientRepository


@pytest.fixture
def llm_items():
    return enrichment_response
