"""
Exceptions raised by the doubles scheduler.
"""

from typing import Optional


class SchedulerError(Exception):
    """Base class for scheduler errors."""


class ScheduleConstructionError(SchedulerError):
    """A single construction attempt broke a round invariant and was abandoned."""

    def __init__(self, message: str, round_number: Optional[int] = None):
        super().__init__(message)
        self.round_number = round_number


class ScheduleGenerationError(SchedulerError):
    """No construction attempt produced a schedule."""
