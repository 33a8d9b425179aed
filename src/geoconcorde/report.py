"""Génération du rapport et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from geoconcorde import __version__
from geoconcorde.config import Config
from geoconcorde.features import Feature, FeatureCollection
from geoconcorde.matching.schema import Matches


def _counts(target_fc: FeatureCollection, result: dict[Feature, Matches]) -> dict[str, int]:
    n_matched = sum(1 for t in target_fc if result.get(t))
    used = {id(result[t].top_match) for t in target_fc if result.get(t)}
    return {
        "nb_target_features": len(target_fc),
        "nb_matched": n_matched,
        "nb_unmatched": len(target_fc) - n_matched,
        "nb_distinct_candidates": len(used),
    }


def build_report_df(
    target_fc: FeatureCollection,
    result: dict[Feature, Matches],
    config: Config,
) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : comptages, paramètres, règles, horodatage, version.
    """
    rows: list[tuple[str, object]] = [("Metric", "Value")]
    rows.extend(_counts(target_fc, result).items())
    rows.extend(
        [
            ("", ""),
            ("Parameters", ""),
            ("min_score", config.min_score),
            ("top_k", config.top_k),
            ("blocker", config.blocker),
            ("disambiguate", config.disambiguate),
            ("overwrite_mode", config.overwrite_mode),
            ("", ""),
            ("Rules", ""),
        ]
    )
    for i, r in enumerate(config.rules):
        rows.append((f"rule_{i}", f"{r.target_col}<-{r.candidate_col} w={r.weight} m={r.method}"))

    rows.extend(
        [
            ("", ""),
            ("Transfer columns", ", ".join(config.transfer_columns)),
            ("", ""),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(
    target_fc: FeatureCollection,
    result: dict[Feature, Matches],
) -> None:
    """Affiche un résumé du rapport en console."""
    counts = _counts(target_fc, result)
    print("\n=== GeoConcorde Report ===")
    print(f"  Entités cibles:       {counts['nb_target_features']}")
    print(f"  Appariées:            {counts['nb_matched']}")
    print(f"  Sans correspondance:  {counts['nb_unmatched']}")
    print(f"  Candidats distincts:  {counts['nb_distinct_candidates']}")
    print(f"  Version:              {__version__}")
    print(f"  Timestamp:            {datetime.now().isoformat()}")
    print("==========================\n")
