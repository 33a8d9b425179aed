"""Configuration, erreurs et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

VALID_METHODS = frozenset({"exact", "normalized_exact", "fuzzy_ratio", "token_set", "contains"})
VALID_OVERWRITE_MODES = frozenset({"never", "if_empty", "always"})
VALID_BLOCKERS = frozenset({"year_or_initial", "default"})


class GeoConcordeError(Exception):
    """Exception de base pour GeoConcorde."""


class ConfigError(GeoConcordeError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(GeoConcordeError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


class InconsistentScoreError(GeoConcordeError, AssertionError):
    """Une même paire (cible, candidat) porte deux scores différents selon le sens."""


class EmptyMatchesError(GeoConcordeError, IndexError):
    """Accès au meilleur match d'une liste de matches vide."""


@dataclass
class FieldRule:
    """Règle de comparaison d'un attribut cible avec un attribut candidat."""

    target_col: str
    candidate_col: str
    weight: float = 1.0
    method: str = "fuzzy_ratio"  # exact, normalized_exact, fuzzy_ratio, token_set, contains
    normalize: bool = True
    remove_diacritics: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FieldRule:
        target_col = d.get("target_col", "")
        candidate_col = d.get("candidate_col", "")
        weight = float(d.get("weight", 1.0))
        method = d.get("method", "fuzzy_ratio")

        if not target_col or not candidate_col:
            raise ConfigError("target_col et candidate_col requis pour chaque règle")
        if weight <= 0:
            raise ConfigError(f"weight doit être > 0 (got {weight})")
        if method not in VALID_METHODS:
            raise ConfigError(f"method invalide: {method!r}. Valides: {sorted(VALID_METHODS)}")

        return cls(
            target_col=target_col,
            candidate_col=candidate_col,
            weight=weight,
            method=method,
            normalize=d.get("normalize", True),
            remove_diacritics=d.get("remove_diacritics", False),
        )


@dataclass
class Config:
    """Configuration principale de GeoConcorde."""

    target_file: str = ""
    candidate_file: str = ""
    target_sheet: str | None = None  # None = première feuille
    candidate_sheet: str | None = None
    target_id_col: str | None = None  # None = numéro de ligne
    candidate_id_col: str | None = None

    rules: list[FieldRule] = field(default_factory=list)
    min_score: float = 0.0
    top_k: int = 5
    blocker: str = "default"
    disambiguate: bool = True

    transfer_columns: list[str] = field(default_factory=list)
    overwrite_mode: str = "if_empty"  # never, if_empty, always
    suffix_on_collision: str = "_cand"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        rules = [FieldRule.from_dict(r) for r in d.get("rules", [])]
        target_file = d.get("target_file", "")
        candidate_file = d.get("candidate_file", "")
        min_score = float(d.get("min_score", 0.0))
        top_k = int(d.get("top_k", 5))
        blocker = d.get("blocker", "default")
        overwrite_mode = d.get("overwrite_mode", "if_empty")

        if not target_file or not candidate_file:
            raise ConfigError("target_file et candidate_file requis")
        if not 0 <= min_score <= 100:
            raise ConfigError(f"min_score doit être entre 0 et 100 (got {min_score})")
        if top_k < 1:
            raise ConfigError(f"top_k doit être >= 1 (got {top_k})")
        if blocker not in VALID_BLOCKERS:
            raise ConfigError(f"blocker invalide: {blocker!r}. Valides: {sorted(VALID_BLOCKERS)}")
        if overwrite_mode not in VALID_OVERWRITE_MODES:
            raise ConfigError(f"overwrite_mode invalide: {overwrite_mode!r}. Valides: {sorted(VALID_OVERWRITE_MODES)}")

        return cls(
            target_file=target_file,
            candidate_file=candidate_file,
            target_sheet=d.get("target_sheet"),
            candidate_sheet=d.get("candidate_sheet"),
            target_id_col=d.get("target_id_col"),
            candidate_id_col=d.get("candidate_id_col"),
            rules=rules,
            min_score=min_score,
            top_k=top_k,
            blocker=blocker,
            disambiguate=bool(d.get("disambiguate", True)),
            transfer_columns=d.get("transfer_columns", []),
            overwrite_mode=overwrite_mode,
            suffix_on_collision=d.get("suffix_on_collision", "_cand"),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """Résout target_file et candidate_file par rapport à base_dir (modifie en place)."""
        base = Path(base_dir)
        if self.target_file and not Path(self.target_file).is_absolute():
            self.target_file = str((base / self.target_file).resolve())
        if self.candidate_file and not Path(self.candidate_file).is_absolute():
            self.candidate_file = str((base / self.candidate_file).resolve())
