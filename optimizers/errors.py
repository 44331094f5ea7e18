"""
Engine Errors - Exception taxonomy for the scheduling engine

Every error raised by the engine derives from SchedulingEngineError so callers
can catch the whole family with one clause.

Key Errors:
    - InvalidInputError: malformed enum values or references (also a ValueError)
    - CyclicWorkflowError: workflow dependencies contain a cycle
    - DeadlineExceededError: a call ran past its timeout (also a TimeoutError)
"""

from typing import List, Optional


class SchedulingEngineError(Exception):
    """Base class for all scheduling engine errors."""


class InvalidInputError(SchedulingEngineError, ValueError):
    """Raised when an input value is outside its allowed domain."""


class CyclicWorkflowError(SchedulingEngineError):
    """
    Raised when workflow step dependencies do not form a DAG.

    The critical path is undefined for a cyclic graph, so the call fails.
    """

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__(f"Workflow dependencies contain a cycle: {' -> '.join(cycle)}")


class DeadlineExceededError(SchedulingEngineError, TimeoutError):
    """Raised when a top-level call exceeds its timeout."""

    def __init__(self, stage: str, timeout: Optional[float] = None):
        self.stage = stage
        self.timeout = timeout
        limit = f" ({timeout}s)" if timeout is not None else ""
        super().__init__(f"Deadline exceeded{limit} during stage '{stage}'")
