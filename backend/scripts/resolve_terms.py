#!/usr/bin/env python3
"""
Resolve a comma-separated ingredient list against the store, enriching unknown terms.
Usage: cd backend && python scripts/resolve_terms.py "Water,Glycerin,Parfum" --category cosmetic [--json]
Exit 0 on success (even if enrichment degraded), 1 on invalid input, 2 on storage failure.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure backend is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_resolver():
    from core.enrichment import EnrichmentClient
    from core.llm_client import OllamaKnowledgeModel
    from core.resolution import IngredientResolver
    from core.storage import IngredientRepository, create_supabase_client

    repository = IngredientRepository(create_supabase_client())
    return IngredientResolver(repository, EnrichmentClient(OllamaKnowledgeModel()))


def main(argv=None, resolver=None) -> int:
    parser = argparse.ArgumentParser(description="Resolve ingredient terms; enrich and persist unknown ones")
    parser.add_argument("terms", help="Comma-separated ingredient names")
    parser.add_argument("--category", default="food", help="Product category: cosmetic or food")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args(argv)

    from core.errors import InvalidInput, StorageError

    try:
        resolver = resolver or build_resolver()
        result = resolver.resolve(args.terms, args.category)
    except InvalidInput as e:
        logger.error("Invalid input: %s", e)
        return 1
    except StorageError as e:
        logger.error("Storage failure: %s", e)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0
    print(f"Known ({len(result.known_terms)}): {', '.join(result.known_terms) or '-'}")
    for record in result.records:
        print(f"  {record.display_name}: rating={record.health_rating} source={record.source.value}")
    print(f"Enriched: {result.llm_query_terms or '-'}")
    if result.enrichment is not None and not result.enrichment.ok:
        print(f"  enrichment failed: {result.enrichment.to_dict()['error']}")
    for outcome in result.persistence:
        suffix = f" ({outcome.error})" if outcome.error else ""
        print(f"  {outcome.name}: {outcome.status.value}{suffix}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
