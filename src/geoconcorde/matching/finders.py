"""Recherche de matches entre une collection cible et une collection candidate."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from geoconcorde.config import Config, FieldRule
from geoconcorde.features import Feature, FeatureCollection, FeatureSchema
from geoconcorde.matching.blockers import build_blocks, candidates_for
from geoconcorde.matching.schema import Matches
from geoconcorde.matching.scorers import score_feature_pair
from geoconcorde.monitor import TaskMonitor

logger = logging.getLogger(__name__)


class MatchFinder:
    """Interface : associe à chaque entité cible ses matches candidats, triés par score décroissant."""

    def match(
        self,
        target_fc: FeatureCollection,
        candidate_fc: FeatureCollection,
        monitor: TaskMonitor,
    ) -> dict[Feature, Matches]:
        raise NotImplementedError


def blank_target_to_matches_map(
    target_features: Iterable[Feature],
    candidate_schema: FeatureSchema,
) -> dict[Feature, Matches]:
    """Associe chaque entité cible à une liste de matches vide."""
    return {f: Matches(candidate_schema) for f in target_features}


class AttributeMatchFinder(MatchFinder):
    """Matching attributaire pondéré (rapidfuzz) avec blocking optionnel."""

    def __init__(
        self,
        rules: list[FieldRule],
        *,
        min_score: float = 0.0,
        top_k: int = 5,
        blocker: str = "default",
    ) -> None:
        self.rules = rules
        self.min_score = min_score
        self.top_k = top_k
        self.blocker = blocker

    @classmethod
    def from_config(cls, config: Config) -> AttributeMatchFinder:
        return cls(config.rules, min_score=config.min_score, top_k=config.top_k, blocker=config.blocker)

    def match(
        self,
        target_fc: FeatureCollection,
        candidate_fc: FeatureCollection,
        monitor: TaskMonitor,
    ) -> dict[Feature, Matches]:
        """
        Score chaque paire (cible, candidat) retenue par le blocking.

        Chaque cible reçoit au plus top_k candidats de score >= min_score,
        triés par score décroissant (tri stable : à score égal, l'ordre de la
        collection candidate est conservé). Les cibles sans candidat ont une
        liste vide.
        """
        monitor.report("Scoring target/candidate pairs")
        all_candidates = candidate_fc.features
        if self.blocker == "year_or_initial":
            candidate_blocks = build_blocks(all_candidates, self.rules, is_target=False)
        else:
            candidate_blocks = {}

        result: dict[Feature, Matches] = {}
        total = len(target_fc)
        for n, target in enumerate(target_fc, start=1):
            if monitor.is_cancel_requested():
                logger.info("Scoring interrompu après %d/%d cibles", n - 1, total)
                break
            monitor.report_progress(n, total, "targets scored")

            if self.blocker == "year_or_initial":
                pool = candidates_for(target, candidate_blocks, self.rules, all_candidates)
            else:
                pool = all_candidates

            scored: list[tuple[Feature, float]] = []
            for candidate in pool:
                score, _ = score_feature_pair(target, candidate, self.rules)
                if score >= self.min_score:
                    scored.append((candidate, score))
            scored.sort(key=lambda pair: pair[1], reverse=True)

            matches = Matches(candidate_fc.feature_schema)
            for candidate, score in scored[: self.top_k]:
                matches.add(candidate, score)
            result[target] = matches

        logger.debug("%d cibles scorées, %d avec au moins un candidat", len(result), sum(1 for m in result.values() if m))
        return result
