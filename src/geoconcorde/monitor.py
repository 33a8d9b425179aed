"""Suivi de progression et annulation coopérative des traitements longs."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class TaskMonitor:
    """
    Moniteur de tâche silencieux.

    Les boucles du matching interrogent is_cancel_requested() entre deux
    entités et s'arrêtent proprement si l'annulation est demandée. Une
    demande faite avant allow_cancellation_requests() est mémorisée mais
    n'est honorée qu'à partir de cet appel.
    """

    def __init__(self) -> None:
        self._cancellation_allowed = False
        self._cancel_requested = False

    def allow_cancellation_requests(self) -> None:
        self._cancellation_allowed = True

    def request_cancel(self) -> None:
        """Demande l'annulation (best-effort, prise en compte à la prochaine entité)."""
        self._cancel_requested = True

    def is_cancel_requested(self) -> bool:
        return self._cancellation_allowed and self._cancel_requested

    def report(self, message: str) -> None:
        """Annonce une nouvelle étape."""

    def report_progress(self, current: int, total: int, unit: str) -> None:
        """Annonce l'avancement (current / total unit)."""


class LoggingTaskMonitor(TaskMonitor):
    """Moniteur qui journalise étapes et progression via logging."""

    def __init__(self, every: int = 100, log: logging.Logger | None = None) -> None:
        super().__init__()
        self.every = max(int(every), 1)
        self._log = log or logger

    def report(self, message: str) -> None:
        self._log.info(message)

    def report_progress(self, current: int, total: int, unit: str) -> None:
        # Une ligne toutes les `every` entités, plus la dernière.
        if current % self.every == 0 or current == total:
            self._log.debug("%d/%d %s", current, total, unit)

    def request_cancel(self) -> None:
        self._log.warning("Annulation demandée")
        super().request_cancel()
