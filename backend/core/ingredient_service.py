"""
Operations exposed to the HTTP layer. Each returns (status_code, envelope) where the
envelope carries `success` plus `data` or `message`/`errors`.
"""
import logging
from typing import Any, Dict, Tuple

from core.errors import DuplicateKey, InvalidInput, StorageError, ValidationError
from core.normalization.normalizer import normalize_term, parse_terms, unique_terms

logger = logging.getLogger(__name__)

Envelope = Tuple[int, Dict[str, Any]]


class IngredientService:
    def __init__(self, repository: Any, resolver: Any):
        self.repository = repository
        self.resolver = resolver

    def create_ingredient(self, payload: Any) -> Envelope:
        try:
            record = self.repository.create(payload)
        except ValidationError as e:
            logger.warning("CREATE validation failed errors=%s", e.messages)
            return 400, {"success": False, "message": "Validation failed.", "errors": e.messages}
        except DuplicateKey as e:
            logger.warning("CREATE duplicate field=%s", e.field)
            return 400, {
                "success": False,
                "message": f"Duplicate field value entered for '{e.field}'. Please use a unique value.",
                "field": e.field,
            }
        except StorageError as e:
            logger.error("CREATE storage failure: %s", e)
            return 500, {
                "success": False,
                "message": "Server error while creating ingredient.",
                "error": str(e),
            }
        return 201, {"success": True, "message": "Ingredient created successfully.", "data": record.to_dict()}

    def search_ingredients(self, raw_terms: Any) -> Envelope:
        try:
            terms = unique_terms(parse_terms(raw_terms))
            records = self.repository.find_by_terms(terms)
        except InvalidInput as e:
            return 400, {"success": False, "message": str(e)}
        except StorageError as e:
            logger.error("SEARCH storage failure: %s", e)
            return 500, {"success": False, "message": "Server error while searching ingredients."}
        return 200, {"success": True, "count": len(records), "data": [r.to_dict() for r in records]}

    def lookup_ingredient(self, term: Any) -> Envelope:
        if not normalize_term(term):
            return 400, {"success": False, "message": 'A non-empty "term" query parameter is required.'}
        try:
            record = self.repository.find_by_name_or_alias(term)
        except StorageError as e:
            logger.error("LOOKUP storage failure: %s", e)
            return 500, {"success": False, "message": "Server error while looking up ingredient."}
        if record is None:
            return 404, {"success": False, "message": f"No ingredient found for '{normalize_term(term)}'."}
        return 200, {"success": True, "data": record.to_dict()}

    def process_list(self, raw_terms: Any, category: Any) -> Envelope:
        try:
            result = self.resolver.resolve(raw_terms, category)
        except InvalidInput as e:
            return 400, {"success": False, "message": str(e)}
        except StorageError as e:
            logger.error("PROCESS_LIST storage failure: %s", e)
            return 500, {"success": False, "message": "Server error while processing ingredient list."}
        return 200, {"success": True, **result.to_dict()}
