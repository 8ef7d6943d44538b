"""
Prompt templates for the Knowledge Model.
"""
from typing import Iterable

CATEGORY_CONTEXT = {
    "cosmetic": "cosmetic and personal-care products applied to skin, hair or nails",
    "food": "food and beverage products that are ingested",
}

ENRICHMENT_PROMPT = """You are an ingredient safety analyst for {context}.

For EVERY ingredient in the list below, return an entry with these fields:
- "ingredient_name": the ingredient's common display name
- "aliases": list of other names (INCI names, E-numbers, synonyms), lowercase
- "functions": list of roles the ingredient plays (e.g. "Preservative", "Emulsifier")
- "health_rating": integer from 1 (harmful) to 5 (beneficial/safe)
- "rating_rationale": one or two sentences explaining the rating
- "potential_side_effects": list of short strings, empty if none are known
- "source": always the string "LLM"
- "source_details": the model or knowledge basis used

Wrap the entries in a single JSON object of the form:
{{"ingredients": [ ... ]}}

Ingredients ({category}):
{terms}

Return ONLY the JSON object."""

LABEL_ANALYSIS_PROMPT = """You are a food safety and health assistant. Given this list of ingredients:

{text}

Extract all the ingredients and give a structured response in JSON format like this:
{{
  "ingredients": [
    {{
      "name": "ingredient name",
      "isHealthy": true | false,
      "notes": "short reason why it's good/bad"
    }}
  ]
}}
Only return the JSON."""


def build_enrichment_prompt(terms: Iterable[str], category: str) -> str:
    terms = list(terms)
    return ENRICHMENT_PROMPT.format(
        context=CATEGORY_CONTEXT.get(category, CATEGORY_CONTEXT["food"]),
        category=category,
        terms="\n".join(f"- {t}" for t in terms),
    )


def build_label_analysis_prompt(text: str) -> str:
    return LABEL_ANALYSIS_PROMPT.format(text=text)
