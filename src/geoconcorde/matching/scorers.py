"""Calcul des scores de similarité attributaire entre entités."""

from __future__ import annotations

from rapidfuzz import fuzz

from geoconcorde.config import FieldRule
from geoconcorde.features import Feature
from geoconcorde.normalize import norm_text, safe_str


def score_field(
    target_val: object,
    candidate_val: object,
    rule: FieldRule,
) -> float:
    """
    Calcule le score (0-100) d'un attribut selon la méthode de la règle.

    Deux valeurs vides valent 100, une seule valeur vide vaut 0.
    """
    if rule.normalize:
        t = norm_text(target_val, remove_diacritics=rule.remove_diacritics)
        c = norm_text(candidate_val, remove_diacritics=rule.remove_diacritics)
    else:
        t = safe_str(target_val)
        c = safe_str(candidate_val)

    if not t and not c:
        return 100.0
    if not t or not c:
        return 0.0

    method = rule.method or "fuzzy_ratio"

    if method in ("exact", "normalized_exact"):
        return 100.0 if t == c else 0.0
    if method == "token_set":
        return float(fuzz.token_set_ratio(t, c))
    if method == "contains":
        if t in c or c in t:
            return 100.0
        return float(fuzz.partial_ratio(t, c))
    return float(fuzz.ratio(t, c))


def score_feature_pair(
    target: Feature,
    candidate: Feature,
    rules: list[FieldRule],
) -> tuple[float, dict[str, float]]:
    """
    Score global (moyenne pondérée) entre une entité cible et une entité candidate.

    Les règles dont un attribut est absent d'un des schémas sont ignorées.

    Returns:
        (score_global, {"col_cible:col_candidat": score})
    """
    total_weight = 0.0
    weighted_sum = 0.0
    details: dict[str, float] = {}

    for rule in rules:
        if rule.target_col not in target.schema or rule.candidate_col not in candidate.schema:
            continue
        sc = score_field(target.get(rule.target_col), candidate.get(rule.candidate_col), rule)
        total_weight += rule.weight
        weighted_sum += sc * rule.weight
        details[f"{rule.target_col}:{rule.candidate_col}"] = sc

    if total_weight == 0:
        return 0.0, details
    return weighted_sum / total_weight, details
