"""Export du mapping cible -> candidat et transfert d'attributs vers la cible."""

from __future__ import annotations

import pandas as pd

from geoconcorde.features import Feature, FeatureCollection
from geoconcorde.matching.schema import Matches
from geoconcorde.normalize import is_blank

STATUS_MATCHED = "matched"
STATUS_UNMATCHED = "unmatched"


def build_mapping_df(
    target_fc: FeatureCollection,
    result: dict[Feature, Matches],
) -> pd.DataFrame:
    """
    Une ligne par entité cible : target_id, candidate_id, score, n_candidates, status.

    Les cibles absentes du résultat (traitement annulé) sont "unmatched".
    """
    rows = []
    for target in target_fc:
        matches = result.get(target)
        if matches:
            rows.append(
                {
                    "target_id": target.fid,
                    "candidate_id": matches.top_match.fid,
                    "score": matches.top_score,
                    "n_candidates": len(matches),
                    "status": STATUS_MATCHED,
                }
            )
        else:
            rows.append(
                {
                    "target_id": target.fid,
                    "candidate_id": "",
                    "score": None,
                    "n_candidates": 0,
                    "status": STATUS_UNMATCHED,
                }
            )
    return pd.DataFrame(rows, columns=["target_id", "candidate_id", "score", "n_candidates", "status"])


def build_mapping_csv(
    target_fc: FeatureCollection,
    result: dict[Feature, Matches],
    output_path: str,
) -> None:
    """Écrit le mapping (voir build_mapping_df) en CSV UTF-8."""
    build_mapping_df(target_fc, result).to_csv(output_path, index=False, encoding="utf-8")


def transfer_columns(
    df_target: pd.DataFrame,
    target_fc: FeatureCollection,
    result: dict[Feature, Matches],
    transfer_columns: list[str],
    *,
    overwrite_mode: str = "if_empty",
    suffix_on_collision: str = "_cand",
) -> pd.DataFrame:
    """
    Copie les attributs du candidat retenu sur la ligne de chaque cible appariée.

    La i-ème entité de target_fc correspond à la i-ème ligne de df_target.

    Args:
        df_target: DataFrame cible (copié, non modifié).
        target_fc: Collection construite depuis df_target.
        result: Table cible -> matches (seul le meilleur match est utilisé).
        transfer_columns: Attributs candidats à transférer.
        overwrite_mode: never (colonne suffixée), if_empty, always.
        suffix_on_collision: Suffixe si la colonne existe et overwrite_mode=never.

    Returns:
        Nouveau DataFrame cible enrichi.
    """
    out = df_target.copy()
    pairs = [
        (pos, result[t].top_match)
        for pos, t in enumerate(target_fc)
        if result.get(t)
    ]

    for col in transfer_columns:
        target_col = col
        if target_col in out.columns and overwrite_mode == "never":
            target_col = col + suffix_on_collision
        if target_col not in out.columns:
            out[target_col] = pd.NA
        col_idx = out.columns.get_loc(target_col)

        for pos, candidate in pairs:
            if col not in candidate.schema:
                continue
            existing = out.iat[pos, col_idx]
            if overwrite_mode == "if_empty" and not (pd.isna(existing) or is_blank(existing)):
                continue
            out.iat[pos, col_idx] = candidate.get(col)

    return out
