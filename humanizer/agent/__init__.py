"""Agentic refinement loop."""

from .workflow import StepStatus, WorkflowStep, WorkflowLog
from .retry import RetryPolicy, call_with_retry
from .controller import (
    AgenticConfig,
    GenerationOutput,
    IterationState,
    RefinementController,
    RunState,
)

__all__ = [
    "StepStatus",
    "WorkflowStep",
    "WorkflowLog",
    "RetryPolicy",
    "call_with_retry",
    "AgenticConfig",
    "GenerationOutput",
    "IterationState",
    "RefinementController",
    "RunState",
]
