"""Modèle d'entités : schéma, entité (feature) et collection d'entités."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from geoconcorde.normalize import safe_str


@dataclass(frozen=True)
class FeatureSchema:
    """Schéma partagé par les entités d'une collection : nom d'attribut -> type."""

    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_columns(cls, columns: Sequence[str], attr_type: str = "string") -> FeatureSchema:
        return cls({str(c): attr_type for c in columns})

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def __hash__(self) -> int:
        return hash(tuple(self.attributes.items()))

    @property
    def names(self) -> list[str]:
        return list(self.attributes)


@dataclass(eq=False)
class Feature:
    """
    Entité d'une collection.

    L'égalité et le hash sont ceux de l'objet (identité) : deux entités aux
    attributs identiques restent deux clés distinctes.
    """

    fid: str
    attributes: dict[str, Any]
    schema: FeatureSchema

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def __repr__(self) -> str:
        return f"Feature(fid={self.fid!r})"


class FeatureCollection:
    """Suite ordonnée d'entités partageant un même schéma."""

    def __init__(self, schema: FeatureSchema, features: Sequence[Feature] = ()) -> None:
        self._schema = schema
        self._features: list[Feature] = []
        for f in features:
            self.add(f)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, id_col: str | None = None) -> FeatureCollection:
        """
        Construit une collection avec une entité par ligne du DataFrame.

        Args:
            df: Table chargée (une ligne = une entité).
            id_col: Colonne donnant l'identifiant; None = position de la ligne.
        """
        schema = FeatureSchema.from_columns(list(df.columns))
        fc = cls(schema)
        for pos, (_, row) in enumerate(df.iterrows()):
            attributes = {str(col): row[col] for col in df.columns}
            fid = safe_str(row[id_col]) if id_col and id_col in df.columns else str(pos)
            fc.add(Feature(fid=fid, attributes=attributes, schema=schema))
        return fc

    def add(self, feature: Feature) -> None:
        if feature.schema != self._schema:
            raise ValueError(f"Schéma incompatible pour {feature!r}")
        self._features.append(feature)

    @property
    def feature_schema(self) -> FeatureSchema:
        return self._schema

    @property
    def features(self) -> list[Feature]:
        return list(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __repr__(self) -> str:
        return f"FeatureCollection({len(self)} features, {len(self._schema.attributes)} attributes)"
