from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal


UNINITIALIZED: Literal["uninitialized"] = "uninitialized"


class TaskState(StrEnum):
    IDLE = "idle"
    INITIALIZED = "initialized"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class TaskReport:
    """
    Outcome of one wallet's task.

    Written only by the owning runner; read-only once the runner reaches a
    terminal state.
    """
    address: str
    name: str | None = None
    total: int | Literal["uninitialized"] = UNINITIALIZED
    progress: int = 0
    success: bool = False
    error: Exception | None = None
    state: TaskState = field(default=TaskState.IDLE)
