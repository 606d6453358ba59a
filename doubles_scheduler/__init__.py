"""
Doubles Scheduler - multi-round court rotations for doubles play.
"""

__version__ = "0.1.0"

from .config import MatchingOptions, ScoreWeights, SearchSettings, SchedulerConfig
from .models import Player, Game, GameSchedule, PlayerStats
from .engine import SchedulingEngine, generate_schedule, generate_schedule_async, validate_schedule
from .exceptions import SchedulerError, ScheduleConstructionError, ScheduleGenerationError
from .scoring import evaluate_score

__all__ = [
    "MatchingOptions",
    "ScoreWeights",
    "SearchSettings",
    "SchedulerConfig",
    "Player",
    "Game",
    "GameSchedule",
    "PlayerStats",
    "SchedulingEngine",
    "generate_schedule",
    "generate_schedule_async",
    "validate_schedule",
    "SchedulerError",
    "ScheduleConstructionError",
    "ScheduleGenerationError",
    "evaluate_score",
]
