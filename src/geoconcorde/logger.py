"""Configuration du logging pour la ligne de commande."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING", name: str = "geoconcorde") -> logging.Logger:
    """
    Installe un handler console unique sur le logger du paquet.

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL.
        name: Nom du logger racine du paquet.

    Returns:
        Le logger configuré.
    """
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Niveau de log invalide: {level!r}")

    log = logging.getLogger(name)
    log.setLevel(numeric)
    log.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    log.addHandler(handler)
    return log
