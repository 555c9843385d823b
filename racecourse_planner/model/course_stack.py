"""Course stacks - a CourseState with bounded undo/redo history.

LocalCourseStack owns the history and applies mutations. RemoteCourseStack
is the read-only snapshot a server pushes to its clients: just the current
state and whether undo/redo are available.

Only the Course is snapshotted; wind history is live data and is never
rolled back by undo.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from racecourse_planner.constants import StackConfig
from racecourse_planner.model.course import Course
from racecourse_planner.model.course_state import CourseState
from racecourse_planner.model.layout import LayoutProvider, default_layout_provider
from racecourse_planner.model.wind_information import WindHistory, WindInformation

logger = logging.getLogger(__name__)


class CourseStack(ABC):
    """Read access shared by local and remote stacks."""

    current: CourseState

    @property
    @abstractmethod
    def can_undo(self) -> bool: ...

    @property
    @abstractmethod
    def can_redo(self) -> bool: ...

    @property
    def course(self) -> Course:
        return self.current.course

    @property
    def wind_history(self) -> WindHistory:
        return self.current.wind_history

    @property
    def course_direction(self) -> float:
        return self.current.course_direction


class LocalCourseStack(CourseStack):
    """CourseState with undo/redo, each side bounded to STACK_LIMIT snapshots.

    When a side is full the oldest snapshot is evicted first.

    Example:
        stack = LocalCourseStack(course=Course())
        stack.modify(lambda course: course.drop_mark(at=here))
        stack.undo()  # True, mark gone
        stack.redo()  # True, mark back
    """

    def __init__(self, course: Course | None = None, limit: int = StackConfig.STACK_LIMIT) -> None:
        self.current = CourseState(course=course if course is not None else Course())
        self.limit = limit
        self.undo_stack: list[Course] = []
        self.redo_stack: list[Course] = []

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def _push(self, stack: list[Course]) -> None:
        stack.append(self.current.course.copy())
        while len(stack) > self.limit:
            stack.pop(0)

    def modify(self, action: Callable[[Course], Any], can_undo: bool = True) -> None:
        """Apply action to the live course, snapshotting it first if undoable.

        An undoable modification clears the redo history.
        """
        if can_undo:
            self._push(self.undo_stack)
            self.redo_stack = []
        action(self.current.course)

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False if there is none."""
        if not self.undo_stack:
            return False
        previous = self.undo_stack.pop()
        self._push(self.redo_stack)
        self.current.course = previous
        logger.info(f"Undo: {len(self.undo_stack)} left, {len(self.redo_stack)} redoable")
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone snapshot. Returns False if there is none."""
        if not self.redo_stack:
            return False
        following = self.redo_stack.pop()
        self._push(self.undo_stack)
        self.current.course = following
        logger.info(f"Redo: {len(self.redo_stack)} left, {len(self.undo_stack)} undoable")
        return True

    def record_wind(self, info: WindInformation) -> bool:
        """Add a wind sample to the live history (never undoable)."""
        return self.current.wind_history.record(info)

    def as_remote(self) -> "RemoteCourseStack":
        """Snapshot suitable for sending to clients."""
        return RemoteCourseStack(
            current=CourseState(course=self.current.course.copy(), wind_history=WindHistory(self.wind_history.samples)),
            can_undo=self.can_undo,
            can_redo=self.can_redo,
        )

    def __repr__(self) -> str:
        return f"LocalCourseStack({self.current.course!r}, undo={len(self.undo_stack)}, redo={len(self.redo_stack)})"


@dataclass(frozen=True)
class RemoteCourseStack(CourseStack):
    """Read-only state pushed from a server, with undo/redo availability."""

    current: CourseState = field(default_factory=CourseState)
    can_undo: bool = False
    can_redo: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current.to_dict(), "can_undo": self.can_undo, "can_redo": self.can_redo}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        layout_provider: LayoutProvider = default_layout_provider,
    ) -> "RemoteCourseStack":
        return cls(
            current=CourseState.from_dict(data=data["current"], layout_provider=layout_provider),
            can_undo=bool(data.get("can_undo", False)),
            can_redo=bool(data.get("can_redo", False)),
        )
