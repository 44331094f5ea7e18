"""
Setup Time Model - Changeover cost between two consecutive jobs

This module estimates the minutes needed to reconfigure the laser between two
jobs from their material, thickness and complexity, and memoizes the result
per material/thickness transition.

Key Responsibilities:
    - Fixed initial setup for the first job of a schedule
    - Base setup plus material and thickness change penalties
    - Complexity factor of the incoming job
    - Thread-safe memoization owned by one engine instance
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from models.job import Job
from models.policy import SchedulingPolicy

logger = logging.getLogger(__name__)

TransitionKey = Tuple[str, float, str, float]


class SetupTimeModel:
    """
    Computes and caches changeover times.

    The cache key ignores complexity: the first transition seen
    for a material/thickness pair fixes the cached value for that pair.
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        """
        Initialize the model.

        Args:
            policy: Scheduling policy with setup constants (defaults if omitted)
        """
        self.policy = policy or SchedulingPolicy()
        self._cache: Dict[TransitionKey, float] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def cache_key(previous_job: Job, current_job: Job) -> TransitionKey:
        return (previous_job.material_type, previous_job.thickness,
                current_job.material_type, current_job.thickness)

    def setup_time(self, previous_job: Optional[Job], current_job: Job) -> float:
        """
        Get the setup time before current_job.

        Args:
            previous_job: Job that ran before, or None for the first job
            current_job: Job about to run

        Returns:
            Setup time in minutes
        """
        if previous_job is None:
            return self.policy.initial_setup_time

        key = self.cache_key(previous_job, current_job)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self.hits += 1
                return cached

            setup_time = self._compute(previous_job, current_job)
            self._cache[key] = setup_time
            self.misses += 1

        logger.debug("Setup %s_%s -> %s_%s: %.2f min", *key, setup_time)
        return setup_time

    def _compute(self, previous_job: Job, current_job: Job) -> float:
        setup_time = self.policy.base_setup_time

        if previous_job.material_type != current_job.material_type:
            setup_time += self.policy.material_change_time

        if previous_job.thickness != current_job.thickness:
            setup_time += self.policy.thickness_change_time

        return setup_time * self.policy.complexity_factors[current_job.complexity]

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear(self):
        """Drop all cached transitions."""
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __str__(self) -> str:
        return f"SetupTimeModel({self.cache_size} cached transitions)"
