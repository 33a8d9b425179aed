"""I/O tableurs : chargement des collections d'entités et sauvegarde (Excel, CSV)."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from geoconcorde.config import Config, GeoConcordeError
from geoconcorde.features import FeatureCollection

logger = logging.getLogger(__name__)

SUPPORTED_INPUT_EXTENSIONS = (".xlsx", ".csv")
CSV_DELIMITERS = [",", ";", "\t", "|"]


class TableFileError(GeoConcordeError):
    """Erreur de chargement d'un fichier (fichier absent, feuille inexistante, format illisible)."""


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str) -> str:
    """Devine le séparateur à partir des premières lignes non vides (défaut : virgule)."""
    with path.open("r", encoding=encoding) as f:
        sample_lines = [line for line in f if line.strip()][:5]
    if not sample_lines:
        return ","
    try:
        return csv.Sniffer().sniff("".join(sample_lines), delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        counts = {d: sample_lines[0].count(d) for d in CSV_DELIMITERS}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else ","


def _check_path(filepath: str | Path) -> Path:
    path = Path(filepath)
    if not path.exists():
        raise TableFileError(f"Fichier introuvable: {path}")
    if path.suffix.lower() not in SUPPORTED_INPUT_EXTENSIONS:
        raise TableFileError(
            f"Format non supporté: {path.suffix}. Formats: {', '.join(SUPPORTED_INPUT_EXTENSIONS)}"
        )
    return path


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur (une seule "feuille" pour CSV).

    Raises:
        TableFileError: Si le fichier est absent ou illisible.
    """
    path = _check_path(filepath)
    if _is_csv(path):
        return ["(données)"]
    try:
        xl = pd.ExcelFile(path, engine="openpyxl")
    except Exception as e:
        raise TableFileError(f"Impossible de lire le fichier {path}: {e}") from e
    return [str(s) for s in xl.sheet_names]


def load_sheet(filepath: str | Path, sheet_name: str | None = None) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte (dtype=str).

    Args:
        filepath: Chemin .xlsx ou .csv.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.

    Raises:
        TableFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = _check_path(filepath)

    if _is_csv(path):
        for encoding in ("utf-8", "latin-1"):
            try:
                sep = _detect_csv_delimiter(path, encoding)
                return pd.read_csv(path, dtype=str, encoding=encoding, sep=sep)
            except UnicodeDecodeError:
                logger.debug("Encodage %s refusé pour %s", encoding, path)
                continue
            except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
                raise TableFileError(f"Erreur CSV {path}: {e}. Vérifiez le séparateur.") from e
        raise TableFileError(f"Encodage non reconnu pour {path}")

    sheets = list_sheets(path)
    if sheet_name is None:
        sheet_name = sheets[0]
    elif sheet_name not in sheets:
        raise TableFileError(f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}")

    try:
        return pd.read_excel(path, sheet_name=sheet_name, dtype=str, engine="openpyxl")
    except Exception as e:
        raise TableFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e


def save_xlsx(filepath: str | Path, dataframes: dict[str, pd.DataFrame], *, index: bool = False) -> None:
    """Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame)."""
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuilles à 31 caractères
            df.to_excel(writer, sheet_name=str(sheet_name)[:31], index=index)


def load_collections(config: Config) -> tuple[pd.DataFrame, pd.DataFrame, FeatureCollection, FeatureCollection]:
    """
    Charge les tables cible et candidate et construit leurs collections d'entités.

    Returns:
        (df_target, df_candidate, target_fc, candidate_fc)
    """
    df_target = load_sheet(config.target_file, config.target_sheet)
    df_candidate = load_sheet(config.candidate_file, config.candidate_sheet)

    for label, df, id_col in (
        ("cible", df_target, config.target_id_col),
        ("candidate", df_candidate, config.candidate_id_col),
    ):
        if id_col and id_col not in df.columns:
            raise TableFileError(f"Colonne identifiant '{id_col}' absente de la table {label}")

    target_fc = FeatureCollection.from_dataframe(df_target, config.target_id_col)
    candidate_fc = FeatureCollection.from_dataframe(df_candidate, config.candidate_id_col)
    logger.info("Chargé %d entités cibles, %d entités candidates", len(target_fc), len(candidate_fc))
    return df_target, df_candidate, target_fc, candidate_fc
