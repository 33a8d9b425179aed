"""Stratégies de blocking pour réduire le nombre de paires comparées."""

from __future__ import annotations

from collections.abc import Iterable

from geoconcorde.config import FieldRule
from geoconcorde.features import Feature
from geoconcorde.normalize import norm_text, safe_str

DEFAULT_BLOCK = "default"

_YEAR_HINTS = ("year", "annee", "année")
_NAME_HINTS = ("name", "nom", "title", "titre", "label", "libelle", "libellé")


def _block_columns(rules: list[FieldRule], *, is_target: bool) -> tuple[str | None, str | None]:
    """Retourne (colonne année, colonne nom) utilisables pour le blocking."""
    year_col = None
    name_col = None
    for r in rules:
        col = r.target_col if is_target else r.candidate_col
        col_lower = col.lower()
        if year_col is None and any(h in col_lower for h in _YEAR_HINTS):
            year_col = col
        elif name_col is None and any(h in col_lower for h in _NAME_HINTS):
            name_col = col
    return year_col, name_col


def block_key_year_or_initial(feature: Feature, rules: list[FieldRule], *, is_target: bool) -> str:
    """
    Clé de bloc : année si présente, sinon initiale normalisée du nom.

    Retourne DEFAULT_BLOCK si aucune des deux n'est disponible.
    """
    year_col, name_col = _block_columns(rules, is_target=is_target)

    if year_col and year_col in feature.schema:
        y = safe_str(feature.get(year_col)).strip()[:4]
        if y.isdigit() and len(y) == 4:
            return f"y_{y}"

    if name_col and name_col in feature.schema:
        norm = norm_text(feature.get(name_col), remove_diacritics=True)
        if norm:
            return f"i_{norm[0]}"

    return DEFAULT_BLOCK


def build_blocks(
    features: Iterable[Feature],
    rules: list[FieldRule],
    *,
    is_target: bool,
) -> dict[str, list[Feature]]:
    """Construit l'index {clé de bloc: [entités]} en conservant l'ordre des entités."""
    blocks: dict[str, list[Feature]] = {}
    for f in features:
        key = block_key_year_or_initial(f, rules, is_target=is_target)
        blocks.setdefault(key, []).append(f)
    return blocks


def candidates_for(
    target: Feature,
    candidate_blocks: dict[str, list[Feature]],
    rules: list[FieldRule],
    all_candidates: list[Feature],
) -> list[Feature]:
    """
    Entités candidates à comparer avec une cible.

    Cible sans clé exploitable : tous les candidats. Clé inconnue côté
    candidats : bloc par défaut, sinon aucun candidat.
    """
    key = block_key_year_or_initial(target, rules, is_target=True)
    if key == DEFAULT_BLOCK:
        return all_candidates
    if key in candidate_blocks:
        return candidate_blocks[key] + candidate_blocks.get(DEFAULT_BLOCK, [])
    return candidate_blocks.get(DEFAULT_BLOCK, [])
