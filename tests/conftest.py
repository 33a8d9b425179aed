"""Fixtures partagées : collections en mémoire, matcher amont figé, moniteurs."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from geoconcorde.features import Feature, FeatureCollection, FeatureSchema
from geoconcorde.matching.finders import MatchFinder
from geoconcorde.matching.schema import Matches
from geoconcorde.monitor import TaskMonitor

TARGET_SCHEMA = FeatureSchema.from_columns(["name"])
CANDIDATE_SCHEMA = FeatureSchema.from_columns(["label"])


def make_collection(schema: FeatureSchema, fids: list[str]) -> FeatureCollection:
    attr = schema.names[0]
    return FeatureCollection(schema, [Feature(fid, {attr: fid}, schema) for fid in fids])


class StaticMatchFinder(MatchFinder):
    """Matcher amont renvoyant une table fixée, décrite par identifiants."""

    def __init__(self, table: dict[str, list[tuple[str, float]]]) -> None:
        self.table = table
        self.calls = 0

    def match(
        self,
        target_fc: FeatureCollection,
        candidate_fc: FeatureCollection,
        monitor: TaskMonitor,
    ) -> dict[Feature, Matches]:
        self.calls += 1
        by_fid = {c.fid: c for c in candidate_fc}
        result: dict[Feature, Matches] = {}
        for t in target_fc:
            if t.fid not in self.table:
                continue
            matches = Matches(candidate_fc.feature_schema)
            for cid, score in self.table[t.fid]:
                matches.add(by_fid[cid], score)
            result[t] = matches
        return result


class RecordingMonitor(TaskMonitor):
    """Enregistre tous les appels de progression."""

    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []
        self.progress: list[tuple[int, int, str]] = []
        self.allow_calls = 0

    def allow_cancellation_requests(self) -> None:
        self.allow_calls += 1
        super().allow_cancellation_requests()

    def report(self, message: str) -> None:
        self.messages.append(message)

    def report_progress(self, current: int, total: int, unit: str) -> None:
        self.progress.append((current, total, unit))


class CancelAfterMonitor(TaskMonitor):
    """Répond "non" aux `polls` premières interrogations, puis demande l'annulation."""

    def __init__(self, polls: int) -> None:
        super().__init__()
        self.polls_left = polls

    def is_cancel_requested(self) -> bool:
        if self.polls_left <= 0:
            return True
        self.polls_left -= 1
        return False


@pytest.fixture
def collections() -> Callable[[list[str], list[str]], tuple[FeatureCollection, FeatureCollection]]:
    def _build(target_fids: list[str], candidate_fids: list[str]) -> tuple[FeatureCollection, FeatureCollection]:
        return make_collection(TARGET_SCHEMA, target_fids), make_collection(CANDIDATE_SCHEMA, candidate_fids)

    return _build


@pytest.fixture
def scenario_a() -> tuple[FeatureCollection, FeatureCollection, StaticMatchFinder]:
    """T1-C1 (0.8); T2-C3 (1.0), T2-C1 (0.9), T2-C2 (0.8); T3-C4 (0.5)."""
    target_fc = make_collection(TARGET_SCHEMA, ["T1", "T2", "T3"])
    candidate_fc = make_collection(CANDIDATE_SCHEMA, ["C1", "C2", "C3", "C4"])
    finder = StaticMatchFinder(
        {
            "T1": [("C1", 0.8)],
            "T2": [("C3", 1.0), ("C1", 0.9), ("C2", 0.8)],
            "T3": [("C4", 0.5)],
        }
    )
    return target_fc, candidate_fc, finder


@pytest.fixture
def recording_monitor() -> RecordingMonitor:
    return RecordingMonitor()


@pytest.fixture
def cancel_after() -> Callable[[int], CancelAfterMonitor]:
    def _build(polls: int) -> CancelAfterMonitor:
        monitor = CancelAfterMonitor(polls)
        monitor.allow_cancellation_requests()
        return monitor

    return _build


@pytest.fixture
def static_finder() -> type[StaticMatchFinder]:
    return StaticMatchFinder


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """setup_logging() attache un handler au flux capturé : on le retire après chaque test."""
    yield
    log = logging.getLogger("geoconcorde")
    log.handlers.clear()
    log.setLevel(logging.NOTSET)
