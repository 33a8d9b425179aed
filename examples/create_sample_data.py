"""Crée des tables de démonstration (gares) et une config pour GeoConcorde."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

cible = pd.DataFrame({
    "id": ["T1", "T2", "T3", "T4"],
    "nom": ["Gare de Lyon", "Gare du Nord", "Gare de l'Est", "Gare Montparnasse"],
    "commune": ["Paris", "Paris", "Paris", "Paris"],
})

candidats = pd.DataFrame({
    "code": ["C1", "C2", "C3", "C4"],
    "name": ["Gare du Nord", "Gare de Lyon", "Gare du Nord (annexe)", "Paris Montparnasse"],
    "city": ["Paris", "Paris", "Paris", "Paris"],
    "uic": ["8727100", "8768600", "8727199", "8739100"],
})

config = {
    "target_file": "data/cible.xlsx",
    "candidate_file": "data/candidats.csv",
    "target_id_col": "id",
    "candidate_id_col": "code",
    "rules": [
        {"target_col": "nom", "candidate_col": "name", "weight": 2.0, "method": "token_set"},
        {"target_col": "commune", "candidate_col": "city", "method": "exact"},
    ],
    "min_score": 70,
    "transfer_columns": ["uic"],
}

cible.to_excel(DATA_DIR / "cible.xlsx", index=False, engine="openpyxl")
candidats.to_csv(DATA_DIR / "candidats.csv", index=False)
(DATA_DIR.parent / "config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")
print(f"Fichiers créés dans {DATA_DIR}")
