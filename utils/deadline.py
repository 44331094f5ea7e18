"""
Deadline - Bound the running time of top-level engine calls

Every engine entry point accepts an optional timeout in seconds. A Deadline is
created at the start of the call and checked between pipeline stages and inside
long traversals.
"""

import time as time_module
from typing import Optional

from optimizers.errors import DeadlineExceededError


class Deadline:
    """
    Monotonic-clock deadline for one call.

    Example:
        >>> deadline = Deadline(timeout=2.0)
        >>> deadline.check("grouping")   # raises DeadlineExceededError when late
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds allowed for the call, or None for no limit
        """
        self.timeout = timeout
        self.started_at = time_module.monotonic()
        self.expires_at = None if timeout is None else self.started_at + timeout

    @classmethod
    def unbounded(cls) -> 'Deadline':
        return cls(None)

    @property
    def elapsed(self) -> float:
        """Seconds since the deadline was created."""
        return time_module.monotonic() - self.started_at

    def expired(self) -> bool:
        return self.expires_at is not None and time_module.monotonic() >= self.expires_at

    def check(self, stage: str):
        """
        Raise if the deadline has passed.

        Args:
            stage: Name of the stage being executed, used in the error message

        Raises:
            DeadlineExceededError: If the timeout has elapsed
        """
        if self.expired():
            raise DeadlineExceededError(stage, self.timeout)
