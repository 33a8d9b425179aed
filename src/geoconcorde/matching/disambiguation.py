"""
Désambiguïsation par meilleurs matches mutuels.

Impose une relation un-à-un entre entités cibles et entités candidates :
seules les paires où chacune est le meilleur match de l'autre sont gardées.

Exemple : le matcher amont renvoie T1-C1 (0.8), T2-C3 (1.0), T2-C1 (0.9),
T2-C2 (0.8), T3-C4 (0.5). Meilleurs matches directs : T1-C1, T2-C3, T3-C4.
Meilleur match inverse de C1 : T2 (0.9 > 0.8), donc T1-C1 n'est pas
réciproque. Résultat : T1 sans match, T2-C3 (1.0), T3-C4 (0.5).

Ce n'est pas une affectation bipartite optimale : une cible dont le meilleur
candidat préfère une autre cible reste sans match.
"""

from __future__ import annotations

import logging

from geoconcorde.config import InconsistentScoreError
from geoconcorde.features import Feature, FeatureCollection, FeatureSchema
from geoconcorde.matching.finders import MatchFinder, blank_target_to_matches_map
from geoconcorde.matching.schema import MatchEntry, Matches
from geoconcorde.monitor import TaskMonitor

logger = logging.getLogger(__name__)


def filter_matches(
    feature_to_matches: dict[Feature, Matches],
    monitor: TaskMonitor,
) -> dict[Feature, Matches]:
    """
    Ne garde que le meilleur match de chaque entité.

    Les entités sans match sont omises. S'arrête à la première demande
    d'annulation et renvoie la table partielle.
    """
    new_map: dict[Feature, Matches] = {}
    if not feature_to_matches:
        return new_map

    total = len(feature_to_matches)
    for n, (feature, old_matches) in enumerate(feature_to_matches.items(), start=1):
        if monitor.is_cancel_requested():
            break
        monitor.report_progress(n, total, "features filtered")
        if old_matches.is_empty():
            continue
        new_matches = Matches(old_matches.schema)
        new_matches.add(old_matches.top_match, old_matches.top_score)
        new_map[feature] = new_matches
    return new_map


def invert(
    feature_to_matches: dict[Feature, Matches],
    monitor: TaskMonitor,
) -> dict[Feature, Matches]:
    """
    Inverse une table A -> matches(B) en table B -> matches(A).

    Chaque entité B citée reçoit une entrée par entité A qui la cite, avec le
    même score, dans l'ordre de parcours de la table d'entrée (non retriée).
    Les entités B jamais citées n'apparaissent pas.
    """
    if not feature_to_matches:
        return {}

    pending: dict[Feature, list[MatchEntry]] = {}
    schemas: dict[Feature, FeatureSchema] = {}
    total = len(feature_to_matches)
    for n, (old_key, old_matches) in enumerate(feature_to_matches.items(), start=1):
        if monitor.is_cancel_requested():
            break
        monitor.report_progress(n, total, "features inverted")
        for entry in old_matches:
            pending.setdefault(entry.feature, []).append(MatchEntry(old_key, entry.score))
            schemas.setdefault(entry.feature, old_key.schema)

    return {key: Matches(schemas[key], entries) for key, entries in pending.items()}


def common_matches(
    feature_to_matches1: dict[Feature, Matches],
    feature_to_matches2: dict[Feature, Matches],
    monitor: TaskMonitor,
) -> dict[Feature, Matches]:
    """
    Garde les entités dont le meilleur match est le même objet dans les deux tables.

    Raises:
        InconsistentScoreError: Si une même paire porte deux scores différents.
    """
    common: dict[Feature, Matches] = {}
    total = len(feature_to_matches1)
    for n, (key, matches1) in enumerate(feature_to_matches1.items(), start=1):
        if monitor.is_cancel_requested():
            break
        monitor.report_progress(n, total, "features")
        matches2 = feature_to_matches2.get(key)
        if matches2 is None:
            continue
        if matches1.top_match is matches2.top_match:
            if matches1.top_score != matches2.top_score:
                raise InconsistentScoreError(
                    f"Scores incohérents pour {key!r} -> {matches1.top_match!r}: "
                    f"{matches1.top_score} != {matches2.top_score}"
                )
            common[key] = matches1
    return common


class TopMatchDisambiguatingMatchFinder(MatchFinder):
    """
    Enveloppe un MatchFinder et ne garde que les meilleurs matches mutuels.

    Le résultat couvre toutes les entités cibles : celles sans match mutuel
    reçoivent une liste de matches vide.
    """

    def __init__(self, match_finder: MatchFinder) -> None:
        self.match_finder = match_finder

    def match(
        self,
        target_fc: FeatureCollection,
        candidate_fc: FeatureCollection,
        monitor: TaskMonitor,
    ) -> dict[Feature, Matches]:
        full_matches = self.match_finder.match(target_fc, candidate_fc, monitor)
        monitor.allow_cancellation_requests()

        monitor.report("Finding best forward matches")
        best_forward = filter_matches(full_matches, monitor)

        # Meilleure cible de chaque candidat, calculée sur la table complète.
        monitor.report("Finding best reverse matches")
        best_reverse = filter_matches(invert(full_matches, monitor), monitor)

        monitor.report("Finding common best matches")
        filtered = common_matches(best_forward, invert(best_reverse, monitor), monitor)

        target_to_matches = blank_target_to_matches_map(target_fc.features, candidate_fc.feature_schema)
        target_to_matches.update(filtered)

        logger.info(
            "%d/%d cibles avec un meilleur match mutuel (%d meilleurs matches directs)",
            len(filtered),
            len(target_fc),
            len(best_forward),
        )
        if monitor.is_cancel_requested():
            logger.warning("Désambiguïsation annulée : résultat partiel")
        return target_to_matches
