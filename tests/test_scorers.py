"""Tests des scorers de similarité."""

from geoconcorde.config import FieldRule
from geoconcorde.features import Feature, FeatureSchema
from geoconcorde.matching.scorers import score_feature_pair, score_field


def test_score_field_exact() -> None:
    rule = FieldRule("a", "b", 1.0, "exact", True)
    assert score_field("Lyon", "lyon", rule) == 100.0
    assert score_field("Lyon", "Lille", rule) == 0.0


def test_score_field_exact_without_normalize() -> None:
    rule = FieldRule("a", "b", 1.0, "exact", False)
    assert score_field("Lyon", "lyon", rule) == 0.0


def test_score_field_fuzzy_ratio() -> None:
    rule = FieldRule("a", "b", 1.0, "fuzzy_ratio", True)
    assert score_field("Marseille", "Marseile", rule) > 80
    assert score_field("abc", "xyz", rule) < 50


def test_score_field_token_set() -> None:
    rule = FieldRule("a", "b", 1.0, "token_set", True)
    assert score_field("rue de la paix", "paix de la rue", rule) == 100.0


def test_score_field_contains() -> None:
    rule = FieldRule("a", "b", 1.0, "contains", True)
    assert score_field("Gare", "Gare du Nord", rule) == 100.0


def test_score_field_diacritics() -> None:
    rule = FieldRule("a", "b", 1.0, "exact", True, remove_diacritics=True)
    assert score_field("Orléans", "Orleans", rule) == 100.0


def test_score_field_empty_values() -> None:
    rule = FieldRule("a", "b", 1.0, "exact", True)
    assert score_field("", None, rule) == 100.0
    assert score_field("x", float("nan"), rule) == 0.0


def test_score_feature_pair_weighted() -> None:
    t_schema = FeatureSchema.from_columns(["nom", "ville"])
    c_schema = FeatureSchema.from_columns(["name", "city"])
    t = Feature("t", {"nom": "Gare", "ville": "Lyon"}, t_schema)
    c = Feature("c", {"name": "Gare", "city": "Lille"}, c_schema)
    rules = [
        FieldRule("nom", "name", 3.0, "exact", True),
        FieldRule("ville", "city", 1.0, "exact", True),
    ]
    score, details = score_feature_pair(t, c, rules)
    assert score == 75.0
    assert details == {"nom:name": 100.0, "ville:city": 0.0}


def test_score_feature_pair_missing_attribute_skipped() -> None:
    schema = FeatureSchema.from_columns(["other"])
    t = Feature("t", {"other": "x"}, schema)
    c = Feature("c", {"other": "x"}, schema)
    score, details = score_feature_pair(t, c, [FieldRule("missing", "missing", 1.0, "exact", True)])
    assert score == 0.0
    assert details == {}
