"""Types du matching : entrée (entité, score) et liste de matches."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from geoconcorde.config import EmptyMatchesError
from geoconcorde.features import Feature, FeatureSchema


@dataclass(frozen=True, eq=False)
class MatchEntry:
    """Une correspondance vers une entité, avec son score (plus haut = meilleur)."""

    feature: Feature
    score: float

    def __repr__(self) -> str:
        return f"MatchEntry({self.feature.fid!r}, score={self.score:.3f})"


class Matches:
    """
    Matches d'une entité vers des entités d'une autre collection.

    Les entrées gardent leur ordre d'ajout. Le meilleur match est l'entrée au
    score le plus haut; en cas d'égalité exacte, la première ajoutée l'emporte.
    Pour une liste fournie triée par score décroissant, c'est donc entries[0].
    """

    def __init__(self, schema: FeatureSchema, entries: list[MatchEntry] | None = None) -> None:
        self.schema = schema
        self._entries: list[MatchEntry] = []
        self._top_index: int | None = None
        for e in entries or []:
            self.add(e.feature, e.score)

    def add(self, feature: Feature, score: float) -> None:
        self._entries.append(MatchEntry(feature, float(score)))
        if self._top_index is None or score > self._entries[self._top_index].score:
            self._top_index = len(self._entries) - 1

    @property
    def entries(self) -> list[MatchEntry]:
        return list(self._entries)

    def feature(self, i: int) -> Feature:
        return self._entries[i].feature

    def score(self, i: int) -> float:
        return self._entries[i].score

    def is_empty(self) -> bool:
        return not self._entries

    @property
    def top(self) -> MatchEntry:
        if self._top_index is None:
            raise EmptyMatchesError("Aucun match: meilleur match indéfini")
        return self._entries[self._top_index]

    @property
    def top_match(self) -> Feature:
        return self.top.feature

    @property
    def top_score(self) -> float:
        return self.top.score

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MatchEntry]:
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"Matches({self._entries!r})"
