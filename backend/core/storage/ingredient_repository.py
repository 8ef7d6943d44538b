"""
Ingredient persistence over a Supabase (PostgREST) table.

Lookups match a term against `name` OR any element of `aliases` in a single
request: or=(name.in.(...),aliases.ov.{...}).
Writes translate PostgREST / transport failures into core.errors at this boundary.
"""
import logging
from typing import Any, Iterable, List, Optional, Set

import httpx
from postgrest.exceptions import APIError

from core.config import get_ingredients_table
from core.errors import DuplicateKey, StorageError, ValidationError
from core.models.ingredient import IngredientInput, IngredientRecord, validate_ingredient
from core.normalization.normalizer import normalize_term

logger = logging.getLogger(__name__)

PROBE_COLUMNS = "name,aliases"

# Postgres SQLSTATE codes surfaced by PostgREST
_UNIQUE_VIOLATION = "23505"
_CONSTRAINT_VIOLATIONS = {"23502", "23514", "22P02", "22003"}


def _quote(value: str) -> str:
    """Double-quote a value for PostgREST list and array literals."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _valid_terms(terms: Any) -> List[str]:
    if not terms or isinstance(terms, str):
        return []
    try:
        items = list(terms)
    except TypeError:
        return []
    return list(dict.fromkeys(t for t in items if isinstance(t, str) and t))


def terms_filter(terms: Iterable[str]) -> str:
    """PostgREST `or` filter body matching name or any alias against the terms."""
    quoted = ",".join(_quote(t) for t in terms)
    return f"name.in.({quoted}),aliases.ov.{{{quoted}}}"


class IngredientRepository:
    """
    Persistence abstraction for ingredient records.
    `client` is a supabase.Client (or anything exposing .table(name)).
    """

    def __init__(self, client: Any, table: Optional[str] = None):
        self._client = client
        self._table_name = table or get_ingredients_table()

    def _table(self):
        return self._client.table(self._table_name)

    def _execute(self, query, operation: str):
        try:
            return query.execute()
        except APIError as e:
            if e.code == _UNIQUE_VIOLATION:
                raise DuplicateKey("name") from e
            if e.code in _CONSTRAINT_VIOLATIONS:
                raise ValidationError([e.message or str(e)]) from e
            logger.error("STORAGE_ERROR op=%s code=%s message=%s", operation, e.code, e.message)
            raise StorageError(f"{operation} failed: {e.message or e}") from e
        except httpx.HTTPError as e:
            logger.error("STORAGE_ERROR op=%s transport=%s", operation, e)
            raise StorageError(f"{operation} failed: {e}") from e

    def _select_by_terms(self, terms: List[str], columns: str, operation: str) -> List[dict]:
        query = self._table().select(columns).or_(terms_filter(terms))
        response = self._execute(query, operation)
        return list(response.data or [])

    def find_by_terms(self, terms: Iterable[str]) -> List[IngredientRecord]:
        """Every record whose name or any alias is one of `terms`. Empty/invalid input -> []."""
        valid = _valid_terms(terms)
        if not valid:
            return []
        rows = self._select_by_terms(valid, "*", "find_by_terms")
        logger.info("STORAGE find_by_terms terms=%d matched=%d", len(valid), len(rows))
        return [IngredientRecord.model_validate(row) for row in rows]

    def probe_terms(self, terms: Iterable[str]) -> Set[str]:
        """
        Existence probe: same single query projected to name and aliases.
        Returns every identifier (name or alias) attached to any matching record.
        """
        valid = _valid_terms(terms)
        if not valid:
            return set()
        identifiers: Set[str] = set()
        for row in self._select_by_terms(valid, PROBE_COLUMNS, "probe_terms"):
            if row.get("name"):
                identifiers.add(row["name"])
            identifiers.update(a for a in (row.get("aliases") or []) if a)
        return identifiers

    def find_by_name_or_alias(self, term: Any) -> Optional[IngredientRecord]:
        """Single-identifier lookup. Returns None for empty terms or no match."""
        key = normalize_term(term)
        if not key:
            return None
        query = (
            self._table()
            .select("*")
            .or_(f"name.eq.{_quote(key)},aliases.cs.{{{_quote(key)}}}")
            .limit(1)
        )
        rows = self._execute(query, "find_by_name_or_alias").data or []
        return IngredientRecord.model_validate(rows[0]) if rows else None

    def create(self, record: Any) -> IngredientRecord:
        """Validate and insert. Raises ValidationError, DuplicateKey or StorageError."""
        ingredient = validate_ingredient(record)
        response = self._execute(self._table().insert(ingredient.to_row()), "create")
        rows = response.data or []
        logger.info("STORAGE created name=%s source=%s", ingredient.name, ingredient.source.value)
        if rows:
            return IngredientRecord.model_validate(rows[0])
        return IngredientRecord.model_validate(ingredient.to_row())

    def upsert_if_absent(self, record: Any) -> bool:
        """
        Atomic INSERT ... ON CONFLICT (name) DO NOTHING.
        Returns True if a row was inserted, False if one already existed (never overwritten).
        """
        ingredient: IngredientInput = validate_ingredient(record)
        query = self._table().upsert(
            ingredient.to_row(),
            on_conflict="name",
            ignore_duplicates=True,
        )
        response = self._execute(query, "upsert_if_absent")
        inserted = bool(response.data)
        logger.info("STORAGE upsert_if_absent name=%s inserted=%s", ingredient.name, inserted)
        return inserted
