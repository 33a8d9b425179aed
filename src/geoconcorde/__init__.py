"""GeoConcorde - Appariement un-à-un d'entités entre deux jeux de données."""

from geoconcorde.config import (
    ConfigError,
    ConfigFileError,
    EmptyMatchesError,
    GeoConcordeError,
    InconsistentScoreError,
)
from geoconcorde.io_tables import TableFileError

__all__ = [
    "__version__",
    "GeoConcordeError",
    "ConfigError",
    "ConfigFileError",
    "TableFileError",
    "InconsistentScoreError",
    "EmptyMatchesError",
]

__version__ = "0.1.0"
