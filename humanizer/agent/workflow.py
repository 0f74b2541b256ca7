"""Workflow step log: the observability side channel of a refinement run."""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class WorkflowStep:
    label: str
    status: StepStatus
    details: str = ""
    model: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)


StepCallback = Callable[[WorkflowStep], None]


class WorkflowLog:
    """Append-only, chronologically ordered list of steps for one run.

    Each appended step is forwarded to the observer callback. Observer
    failures are logged and never reach the caller.
    """

    def __init__(self, on_step: Optional[StepCallback] = None):
        self._steps: List[WorkflowStep] = []
        self._on_step = on_step

    def add(self, label: str, status: StepStatus, details: str = "", model: Optional[str] = None) -> WorkflowStep:
        step = WorkflowStep(label=label, status=status, details=details, model=model)
        self._steps.append(step)
        log = logger.warning if status in (StepStatus.WARNING, StepStatus.ERROR) else logger.info
        log(f"[{step.status.value}] {label}: {details}")
        if self._on_step is not None:
            try:
                self._on_step(step)
            except Exception as e:
                logger.warning(f"Step observer raised {type(e).__name__}: {e}")
        return step

    @property
    def steps(self) -> List[WorkflowStep]:
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
