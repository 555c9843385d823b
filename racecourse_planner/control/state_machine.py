"""Course direction state machine using python-statemachine.

The course direction either follows the wind or is locked by the PRO:

    ┌───────────────┐    lock(direction)    ┌────────┐
    │ TRACKING_WIND │ ────────────────────► │ LOCKED │ ◄─┐
    │   (initial)   │ ◄──────────────────── │        │ ──┘ lock(direction)
    └───────────────┘        unlock         └────────┘

The machine stores no state of its own. The current state is read from the
course (a locked direction means LOCKED), so undo/redo on the stack moves
the machine along with the course. Transitions record an undoable change
on the stack through before_* hooks.

Usage:
    machine = CourseDirectionMachine(stack=stack)
    machine.try_transition("lock", direction=270.0)  # True
    machine.try_transition("unlock")                  # True
    machine.try_transition("unlock")                  # False, already tracking wind
"""

import logging
from typing import Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from racecourse_planner.core.geo_calculator import normalize_bearing
from racecourse_planner.model.course_stack import LocalCourseStack

logger = logging.getLogger(__name__)


class CourseDirectionContext:
    """Model for CourseDirectionMachine: derives the state from the stack's course."""

    def __init__(self, stack: LocalCourseStack) -> None:
        self.stack = stack

    @property
    def state(self) -> str:
        if self.stack.course.locked_course_direction is not None:
            return "locked"
        return "tracking_wind"

    @state.setter
    def state(self, value: str) -> None:
        # Derived from the course; before_* hooks have already changed it
        pass

    def __repr__(self) -> str:
        return f"CourseDirectionContext(state={self.state}, direction={self.stack.course_direction:.1f})"


class CourseDirectionMachine(StateMachine):
    """Lock or release the course direction.

    States:
        tracking_wind: Direction follows the weighted wind average
        locked: Direction fixed at course.locked_course_direction
    """

    tracking_wind = State("TrackingWind", initial=True)
    locked = State("Locked")

    # Re-locking at a new direction stays locked
    lock = tracking_wind.to(locked) | locked.to.itself()
    unlock = locked.to(tracking_wind)

    def __init__(self, stack: LocalCourseStack) -> None:
        super().__init__(model=CourseDirectionContext(stack=stack))

    @property
    def context(self) -> CourseDirectionContext:
        return self.model

    @property
    def is_locked(self) -> bool:
        return self.context.state == self.locked.id

    def before_lock(self, direction: float) -> None:
        """Record the locked direction as an undoable change."""
        bearing = normalize_bearing(direction)
        self.context.stack.modify(lambda course: setattr(course, "locked_course_direction", bearing))

    def before_unlock(self) -> None:
        self.context.stack.modify(lambda course: setattr(course, "locked_course_direction", None))

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[DIRECTION] {source.name} --({event})--> {target.name}")

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.context.state}")
            return False

    def __repr__(self) -> str:
        return f"CourseDirectionMachine(state={self.context.state}, model={self.context!r})"
