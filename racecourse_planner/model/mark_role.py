"""MarkRole - the semantic identity of a position on the course.

Targets computed from a layout always carry a specific role. Marks that
are physically dropped on the water are GENERIC_MARK until they are
matched to a target, and may change role as the wind shifts.

Role values are persisted, so they must never change.
"""

from enum import Enum


class MarkRole(Enum):
    """Course-position identities."""

    # The committee boat end of the start line, usually marked with an orange flag
    START_FLAG = "startFlag"
    # The pin end of the start line
    START_PIN = "startPin"
    # The committee boat end of the finish line, usually marked with a blue flag
    FINISH_FLAG = "finishFlag"
    FINISH_PIN = "finishPin"
    WINDWARD = "windward"
    WINDWARD_OFFSET = "windwardOffset"
    LEEWARD = "leeward"
    LEEWARD_OFFSET = "leewardOffset"
    LEEWARD_GATE_LEFT = "leewardGateLeft"
    LEEWARD_GATE_RIGHT = "leewardGateRight"
    JIBE = "jibe"
    WINDWARD_JIBE = "windwardJibe"
    LEEWARD_JIBE = "leewardJibe"
    GENERIC_MARK = "genericMark"

    @property
    def is_flag(self) -> bool:
        return self in (MarkRole.START_FLAG, MarkRole.FINISH_FLAG)

    @property
    def is_mark(self) -> bool:
        return not self.is_flag
