"""In-memory planner workspace: the state every request operates on."""

from __future__ import annotations

import threading
from datetime import date

from app.core.config import Settings
from app.core.months import Clock
from app.repositories.allocation_repository import AllocationStore
from app.repositories.directory_repository import DirectoryRepository
from app.services.aggregation_service import AggregationRules, AggregationService
from app.services.allocation_edit_service import AllocationEditEngine, EditRules
from app.services.export_service import ExportService
from app.services.summary_service import NarrativeClient, NarrativeService


class PlannerWorkspace:
    """Directory, allocation store and gesture engine behind one mutex.

    Sync endpoints run in a thread pool, so the store, the directory and the
    gesture state share a single re-entrant lock. Read views that combine
    several queries should hold ``lock`` for their whole duration.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Clock = date.today,
        narrative_client: NarrativeClient | None = None,
    ) -> None:
        self.settings = settings
        self.clock = clock
        self.lock = threading.RLock()
        self.store = AllocationStore(lock=self.lock)
        self.directory = DirectoryRepository(self.store, lock=self.lock)
        self.engine = AllocationEditEngine(
            self.store,
            rules=EditRules.from_settings(settings),
            directory=self.directory,
            lock=self.lock,
        )
        self.aggregation = AggregationService(
            self.store,
            self.directory,
            rules=AggregationRules.from_settings(settings),
        )
        self.exports = ExportService(self.aggregation)
        self.narrative = NarrativeService(
            self.directory,
            self.aggregation,
            client=narrative_client,
            lock=self.lock,
        )
