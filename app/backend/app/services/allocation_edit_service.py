"""Gesture interpreter turning grid clicks, drags and typed values into store writes."""

from __future__ import annotations

import enum
import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from app.core.config import Settings
from app.core.months import Month
from app.repositories.allocation_repository import AllocationStore, StoreWrite
from app.repositories.directory_repository import DirectoryRepository

logger = logging.getLogger(__name__)

# Lenient integer parse: optional whitespace and sign, then leading digits.
LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class CellRef:
    project_id: str
    member_id: str
    month: Month

    @property
    def row(self) -> tuple[str, str]:
        return (self.project_id, self.member_id)


@dataclass(frozen=True, slots=True)
class CellWrite:
    cell: CellRef
    percentage: int
    result: StoreWrite


# ---------- Events ----------
@dataclass(frozen=True, slots=True)
class PointerDown:
    cell: CellRef


@dataclass(frozen=True, slots=True)
class PointerEnterCell:
    cell: CellRef


@dataclass(frozen=True, slots=True)
class PointerUp:
    cell: CellRef


@dataclass(frozen=True, slots=True)
class GlobalPointerUp:
    pass


@dataclass(frozen=True, slots=True)
class OpenEditor:
    cell: CellRef


@dataclass(frozen=True, slots=True)
class CommitEditor:
    text: str


@dataclass(frozen=True, slots=True)
class CancelEditor:
    pass


GridEvent = PointerDown | PointerEnterCell | PointerUp | GlobalPointerUp | OpenEditor | CommitEditor | CancelEditor


# ---------- State ----------
class GesturePhase(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(slots=True)
class DragGesture:
    project_id: str
    member_id: str
    start_month: Month
    paint_value: int
    moved: bool = False
    painted: set[Month] = field(default_factory=set)

    def covers_row(self, cell: CellRef) -> bool:
        return cell.project_id == self.project_id and cell.member_id == self.member_id


@dataclass(slots=True)
class EditorSession:
    cell: CellRef
    seed_text: str


@dataclass(slots=True)
class GestureOutcome:
    writes: list[CellWrite] = field(default_factory=list)
    phase: GesturePhase = GesturePhase.IDLE
    editor: EditorSession | None = None
    applied: bool = True


@dataclass(frozen=True, slots=True)
class EditRules:
    """Value domain of the grid gestures."""

    full_percent: int = 100
    partial_percent: int = 50
    paint_percent: int = 100

    @classmethod
    def from_settings(cls, settings: Settings) -> EditRules:
        return cls(
            full_percent=settings.click_cycle_full_percent,
            partial_percent=settings.click_cycle_partial_percent,
            paint_percent=settings.drag_paint_percent,
        )

    def next_click_value(self, current: int) -> int:
        # Three states keyed on the current value: empty, exactly full, anything else.
        if current == 0:
            return self.full_percent
        if current == self.full_percent:
            return self.partial_percent
        return 0

    def paint_value_for(self, start_value: int) -> int:
        return self.paint_percent if start_value == 0 else 0


def parse_percentage(text: str) -> int | None:
    match = LEADING_INTEGER.match(text)
    if match is None:
        return None
    return int(match.group(1))


class AllocationEditEngine:
    """Single gesture state machine over the allocation grid.

    States are ``Idle`` and ``Dragging``; at most one drag exists per engine,
    so one engine per store serializes all painting. An inline editor can be
    open independently; opening it cancels any drag.
    """

    def __init__(
        self,
        store: AllocationStore,
        *,
        rules: EditRules | None = None,
        directory: DirectoryRepository | None = None,
        lock: threading.RLock | None = None,
    ) -> None:
        self.store = store
        self.rules = rules or EditRules()
        self.directory = directory
        self._lock = lock or threading.RLock()
        self._drag: DragGesture | None = None
        self._editor: EditorSession | None = None
        self._handlers: dict[type, Callable[..., GestureOutcome]] = {
            PointerDown: lambda event: self.pointer_down(event.cell),
            PointerEnterCell: lambda event: self.pointer_enter(event.cell),
            PointerUp: lambda event: self.pointer_up(event.cell),
            GlobalPointerUp: lambda event: self.global_pointer_up(),
            OpenEditor: lambda event: self.open_editor(event.cell),
            CommitEditor: lambda event: self.commit_editor(event.text),
            CancelEditor: lambda event: self.cancel_editor(),
        }
        if directory is not None:
            directory.on_member_deleted(self.close_member)

    # ---------- Introspection ----------
    @property
    def phase(self) -> GesturePhase:
        return GesturePhase.DRAGGING if self._drag is not None else GesturePhase.IDLE

    @property
    def drag(self) -> DragGesture | None:
        return self._drag

    @property
    def editor(self) -> EditorSession | None:
        return self._editor

    def handle(self, event: GridEvent) -> GestureOutcome:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported grid event {type(event).__name__}.")
        return handler(event)

    # ---------- Writes ----------
    def _write(self, cell: CellRef, percentage: int) -> CellWrite:
        # Values at or below zero mean "no allocation".
        result = self.store.upsert(cell.project_id, cell.member_id, cell.month, max(percentage, 0))
        return CellWrite(cell=cell, percentage=max(percentage, 0), result=result)

    def _outcome(self, writes: list[CellWrite] | None = None, *, applied: bool = True) -> GestureOutcome:
        return GestureOutcome(
            writes=writes or [],
            phase=self.phase,
            editor=self._editor,
            applied=applied,
        )

    def _paint(self, cell: CellRef) -> CellWrite | None:
        drag = self._drag
        if drag is None or cell.month in drag.painted:
            return None
        drag.painted.add(cell.month)
        return self._write(cell, drag.paint_value)

    # ---------- Pointer gestures ----------
    def pointer_down(self, cell: CellRef) -> GestureOutcome:
        with self._lock:
            current = self.store.percentage(cell.project_id, cell.member_id, cell.month)
            self._drag = DragGesture(
                project_id=cell.project_id,
                member_id=cell.member_id,
                start_month=cell.month,
                paint_value=self.rules.paint_value_for(current),
            )
            logger.debug("Gesture started on %s/%s/%s (paint %s%%)", *cell.row, cell.month, self._drag.paint_value)
            return self._outcome()

    def pointer_enter(self, cell: CellRef) -> GestureOutcome:
        with self._lock:
            drag = self._drag
            if drag is None or not drag.covers_row(cell):
                return self._outcome()

            writes: list[CellWrite] = []
            if not drag.moved and cell.month != drag.start_month:
                drag.moved = True
                start_write = self._paint(CellRef(drag.project_id, drag.member_id, drag.start_month))
                if start_write is not None:
                    writes.append(start_write)

            if drag.moved:
                write = self._paint(cell)
                if write is not None:
                    writes.append(write)
            return self._outcome(writes)

    def pointer_up(self, cell: CellRef) -> GestureOutcome:
        with self._lock:
            drag = self._drag
            if drag is None:
                return self._outcome()

            writes: list[CellWrite] = []
            if not drag.moved and drag.covers_row(cell) and cell.month == drag.start_month:
                current = self.store.percentage(cell.project_id, cell.member_id, cell.month)
                writes.append(self._write(cell, self.rules.next_click_value(current)))
            self._end_drag()
            return self._outcome(writes)

    def global_pointer_up(self) -> GestureOutcome:
        """Release outside any cell: close the active drag without writing."""

        with self._lock:
            if self._drag is not None:
                logger.debug("Gesture closed by release outside the grid")
                self._end_drag()
            return self._outcome()

    def click(self, cell: CellRef) -> GestureOutcome:
        with self._lock:
            self.pointer_down(cell)
            return self.pointer_up(cell)

    def _end_drag(self) -> None:
        if self._drag is not None:
            self._drag.painted.clear()
        self._drag = None

    # ---------- Direct entry ----------
    def open_editor(self, cell: CellRef) -> GestureOutcome:
        with self._lock:
            self._end_drag()
            current = self.store.percentage(cell.project_id, cell.member_id, cell.month)
            self._editor = EditorSession(cell=cell, seed_text=str(current) if current > 0 else "")
            return self._outcome()

    def commit_editor(self, text: str) -> GestureOutcome:
        with self._lock:
            session = self._editor
            if session is None:
                return self._outcome(applied=False)
            self._editor = None

            value = parse_percentage(text)
            if value is None:
                logger.debug("Discarded unparseable entry %r for %s/%s/%s", text, *session.cell.row, session.cell.month)
                return self._outcome(applied=False)
            # No upper clamp: typed values above the ceiling are kept as-is.
            return self._outcome([self._write(session.cell, value)])

    def cancel_editor(self) -> GestureOutcome:
        with self._lock:
            self._editor = None
            return self._outcome()

    def set_value(self, cell: CellRef, text: str) -> GestureOutcome:
        with self._lock:
            self.open_editor(cell)
            return self.commit_editor(text)

    # ---------- Rows ----------
    def _close_rows(self, matches: Callable[[tuple[str, str]], bool]) -> None:
        if self._drag is not None and matches((self._drag.project_id, self._drag.member_id)):
            self._end_drag()
        if self._editor is not None and matches(self._editor.cell.row):
            self._editor = None

    def close_member(self, member_id: str) -> None:
        """End any drag or open editor on one of the member's rows, without writing."""

        with self._lock:
            self._close_rows(lambda row: row[1] == member_id)

    def remove_member_from_project(self, project_id: str, member_id: str) -> int:
        """Delete the whole (project, member) row across all months in one step."""

        with self._lock:
            self._close_rows(lambda row: row == (project_id, member_id))
            if self.directory is not None:
                self.directory.drop_from_roster(project_id, member_id)
            removed = self.store.delete_where(
                lambda row: row.project_id == project_id and row.member_id == member_id
            )
        logger.info("Removed member %s from project %s (%s allocation(s))", member_id, project_id, removed)
        return removed
