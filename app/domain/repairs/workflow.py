"""
Repair workflow states and transition rules.

Repair statuses: initial, pending_approval, parts_ordered, in_repair, completed.
Any status may move to any other one; the only rule with a side effect is the
edge into 'completed', which triggers the pickup and billing notifications.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from threading import Lock
from typing import Optional

logger = logging.getLogger(__name__)


class RepairStatus(str, Enum):
    INITIAL = "initial"
    PENDING_APPROVAL = "pending_approval"
    PARTS_ORDERED = "parts_ordered"
    IN_REPAIR = "in_repair"
    COMPLETED = "completed"


class ClientDecision(str, Enum):
    ACCEPTED = "accepted"
    MAX_PRICE = "max_price"
    DETAILED_QUOTE = "detailed_quote"


TERMINAL_STATUSES = {RepairStatus.COMPLETED}


def _status(value) -> Optional[RepairStatus]:
    if value is None:
        return None
    return value if isinstance(value, RepairStatus) else RepairStatus(value)


def is_completion_edge(previous_status, new_status) -> bool:
    """True only when the repair enters 'completed' from another status"""
    return (
        _status(new_status) == RepairStatus.COMPLETED
        and _status(previous_status) != RepairStatus.COMPLETED
    )


def is_closed(status) -> bool:
    return _status(status) in TERMINAL_STATUSES


class ActionInProgress(Exception):
    """Raised when the same action is already running for the same repair"""

    def __init__(self, action: str, repair_id: int):
        self.action = action
        self.repair_id = repair_id
        super().__init__(f"{action} already in progress for repair {repair_id}")


class InFlightGuard:
    """
    Busy-state guard for per-repair actions.

    A second trigger of the same action while the first is still running is
    refused; the first one is never cancelled.
    """

    def __init__(self):
        self._active: set[tuple[str, int]] = set()
        self._lock = Lock()

    @contextmanager
    def hold(self, action: str, repair_id: int):
        key = (action, repair_id)
        with self._lock:
            if key in self._active:
                logger.warning(f"⏳ {action} already running for repair {repair_id}")
                raise ActionInProgress(action, repair_id)
            self._active.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(key)

    def is_busy(self, action: str, repair_id: int) -> bool:
        with self._lock:
            return (action, repair_id) in self._active


# Shared by every request handled by this process
repair_action_guard = InFlightGuard()
