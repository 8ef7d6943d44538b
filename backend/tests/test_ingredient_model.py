"""
Unit tests: ingredient record validation and normalization.
"""
import pytest

from core.errors import ValidationError
from core.models.ingredient import IngredientRecord, IngredientSource, validate_ingredient


def test_name_and_aliases_are_normalized():
    ing = validate_ingredient({
        "name": "  Parfum ",
        "aliases": ["Fragrance", " (Aroma) ", "fragrance", "", "PARFUM"],
    })
    assert ing.name == "parfum"
    assert ing.aliases == ["fragrance", "aroma"]


def test_display_name_defaults_to_name():
    ing = validate_ingredient({"name": "Glycerin"})
    assert ing.display_name == "glycerin"
    ing = validate_ingredient({"name": "glycerin", "display_name": "Glycerin"})
    assert ing.display_name == "Glycerin"


def test_defaults():
    ing = validate_ingredient({"name": "water"})
    assert ing.source == IngredientSource.LLM
    assert ing.functions == []
    assert ing.potential_side_effects == []
    assert ing.health_rating is None
    row = ing.to_row()
    assert row["source"] == "LLM"


@pytest.mark.parametrize("rating", [0, 6, -1, 2.5])
def test_health_rating_out_of_range(rating):
    with pytest.raises(ValidationError) as exc:
        validate_ingredient({"name": "water", "health_rating": rating})
    assert any(m.startswith("health_rating") for m in exc.value.messages)


def test_missing_name_and_bad_source_report_each_field():
    with pytest.raises(ValidationError) as exc:
        validate_ingredient({"name": " () ", "source": "Blog"})
    fields = {m.split(":")[0] for m in exc.value.messages}
    assert fields == {"name", "source"}
    assert any("Ingredient name is required." in m for m in exc.value.messages)


def test_non_mapping_payload():
    with pytest.raises(ValidationError):
        validate_ingredient(["water"])


def test_text_lists_trimmed():
    ing = validate_ingredient({"name": "x", "functions": [" Solvent ", "", 3], "potential_side_effects": "Irritation"})
    assert ing.functions == ["Solvent"]
    assert ing.potential_side_effects == ["Irritation"]


def test_record_from_row_keeps_timestamps():
    rec = IngredientRecord.model_validate({
        "id": 7, "name": "water", "display_name": "Water", "aliases": ["aqua"],
        "source": "Curated", "created_at": "2024-05-01T10:00:00+00:00", "updated_at": None,
    })
    d = rec.to_dict()
    assert d["id"] == 7
    assert d["source"] == "Curated"
    assert d["created_at"].startswith("2024-05-01T10:00:00")


@pytest.mark.parametrize("field,value", [("aliases", 5), ("functions", True), ("potential_side_effects", {"a": 1})])
def test_scalar_list_fields_are_validation_errors(field, value):
    with pytest.raises(ValidationError) as exc:
        validate_ingredient({"name": "x", field: value})
    assert exc.value.messages == [f"{field}: must be a list of strings"]
