"""Tests du matcher attributaire amont."""

import pytest

from geoconcorde.config import Config, FieldRule
from geoconcorde.features import Feature, FeatureCollection, FeatureSchema
from geoconcorde.matching.disambiguation import TopMatchDisambiguatingMatchFinder
from geoconcorde.matching.finders import AttributeMatchFinder, blank_target_to_matches_map
from geoconcorde.monitor import TaskMonitor

T_SCHEMA = FeatureSchema.from_columns(["nom", "annee"])
C_SCHEMA = FeatureSchema.from_columns(["name", "year"])
RULES = [
    FieldRule("nom", "name", 2.0, "fuzzy_ratio", True),
    FieldRule("annee", "year", 1.0, "exact", True),
]


@pytest.fixture
def target_fc() -> FeatureCollection:
    rows = [("Gare Saint-Lazare", "1837"), ("Pont Neuf", "1607"), ("Tour Eiffel", "1889")]
    return FeatureCollection(T_SCHEMA, [Feature(str(i), {"nom": n, "annee": y}, T_SCHEMA) for i, (n, y) in enumerate(rows)])


@pytest.fixture
def candidate_fc() -> FeatureCollection:
    rows = [("Pont-Neuf", "1607"), ("Gare St Lazare", "1837"), ("Gare Saint Lazare (annexe)", "1837"), ("Arc", "1836")]
    return FeatureCollection(C_SCHEMA, [Feature(f"c{i}", {"name": n, "year": y}, C_SCHEMA) for i, (n, y) in enumerate(rows)])


def test_attribute_finder_sorted_descending(target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    result = AttributeMatchFinder(RULES, top_k=4).match(target_fc, candidate_fc, TaskMonitor())
    assert list(result) == target_fc.features
    for matches in result.values():
        scores = [e.score for e in matches]
        assert scores == sorted(scores, reverse=True)
        assert matches.schema == C_SCHEMA
    assert result[target_fc.features[1]].top_match.fid == "c0"


def test_attribute_finder_min_score_and_top_k(target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    result = AttributeMatchFinder(RULES, min_score=70.0, top_k=1).match(target_fc, candidate_fc, TaskMonitor())
    assert all(len(m) <= 1 for m in result.values())
    assert all(e.score >= 70.0 for m in result.values() for e in m)
    # Aucun candidat proche pour la tour Eiffel : liste vide mais présente
    assert result[target_fc.features[2]].is_empty()


def test_attribute_finder_blocking(target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    finder = AttributeMatchFinder(RULES, top_k=10, blocker="year_or_initial")
    result = finder.match(target_fc, candidate_fc, TaskMonitor())
    gare = result[target_fc.features[0]]
    assert {e.feature.fid for e in gare} == {"c1", "c2"}


def test_attribute_finder_cancellation(target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    monitor = TaskMonitor()
    monitor.allow_cancellation_requests()
    monitor.request_cancel()
    assert AttributeMatchFinder(RULES).match(target_fc, candidate_fc, monitor) == {}


def test_attribute_finder_from_config() -> None:
    config = Config(target_file="t.xlsx", candidate_file="c.xlsx", rules=RULES, min_score=10, top_k=2, blocker="year_or_initial")
    finder = AttributeMatchFinder.from_config(config)
    assert finder.rules is RULES
    assert (finder.min_score, finder.top_k, finder.blocker) == (10, 2, "year_or_initial")


def test_disambiguated_attribute_matching(target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    finder = TopMatchDisambiguatingMatchFinder(AttributeMatchFinder(RULES, min_score=50.0))
    result = finder.match(target_fc, candidate_fc, TaskMonitor())
    pairs = {t.fid: m.top_match.fid for t, m in result.items() if m}
    assert pairs == {"0": "c1", "1": "c0"}


def test_blank_target_to_matches_map(target_fc: FeatureCollection) -> None:
    blank = blank_target_to_matches_map(target_fc.features, C_SCHEMA)
    assert list(blank) == target_fc.features
    assert all(m.is_empty() and m.schema == C_SCHEMA for m in blank.values())
    values = list(blank.values())
    assert values[0] is not values[1]
