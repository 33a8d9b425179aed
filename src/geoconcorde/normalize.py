"""Normalisation des valeurs d'attributs avant comparaison."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any


def _is_missing(val: Any) -> bool:
    return val is None or (isinstance(val, float) and (math.isnan(val) or math.isinf(val)))


def _remove_diacritics(s: str) -> str:
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def norm_text(
    s: Any,
    *,
    lower: bool = True,
    remove_diacritics: bool = False,
) -> str:
    """
    Normalise une valeur d'attribut : NFKC, espaces multiples → espace simple, strip.

    Args:
        s: Valeur (convertie en str si numérique; None/NaN → "").
        lower: Mettre en minuscules.
        remove_diacritics: Supprimer les accents.
    """
    if _is_missing(s):
        return ""
    text = unicodedata.normalize("NFKC", str(s))
    text = re.sub(r"\s+", " ", text).strip()
    if lower:
        text = text.lower()
    if remove_diacritics:
        text = _remove_diacritics(text)
    return text


def safe_str(val: Any) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if _is_missing(val):
        return ""
    return str(val)


def is_blank(val: Any) -> bool:
    """True si la valeur est absente ou ne contient que des espaces."""
    return safe_str(val).strip() == ""
