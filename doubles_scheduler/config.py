"""
Configuration management for the doubles scheduler.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Tuple
import pytz


class MatchingOptions(BaseModel):
    """Options for one scheduling run.

    The model is permissive: zero or negative counts are accepted
    and the engine degrades to empty rounds. Use ``validate_options`` for
    user-facing sanity checks.
    """
    model_config = ConfigDict(frozen=True)

    number_of_courts: int = Field(default=2, description="Courts available per round")
    number_of_rounds: int = Field(default=7, description="Rounds to generate")
    balance_skill_levels: bool = Field(default=True, description="Balance team skill totals")
    respect_partner_preferences: bool = Field(default=True, description="Pair declared partners together")
    max_skill_difference: float = Field(default=2.0, description="Max team skill gap when balancing")
    distribute_rest_equally: bool = Field(default=True, description="Spread rest rounds evenly")
    first_round_sitters: Optional[Tuple[str, ...]] = Field(
        default=None, description="Player ids forced to sit out round 1"
    )

    @field_validator('first_round_sitters')
    @classmethod
    def dedupe_sitters(cls, v):
        if v is None:
            return v
        seen = []
        for pid in v:
            if pid not in seen:
                seen.append(pid)
        return tuple(seen)


class ScoreWeights(BaseModel):
    """Weights for the schedule scoring terms, highest priority first."""
    rest_distribution: float = Field(default=10000.0, ge=0.0, description="Rest count spread")
    rest_spacing: float = Field(default=1000.0, ge=0.0, description="Unevenness of rest gaps")
    partner_repeats: float = Field(default=200.0, ge=0.0, description="Repeated partnerships")
    consecutive_opponents: float = Field(default=50.0, ge=0.0, description="Opponents met in recent rounds")
    opponent_repeats: float = Field(default=80.0, ge=0.0, description="Opponents met more than twice")
    consecutive_courts: float = Field(default=30.0, ge=0.0, description="Same court in consecutive rounds")
    skill_balance: float = Field(default=5.0, ge=0.0, description="Total team skill difference")
    skill_violations: float = Field(default=100.0, ge=0.0, description="Games over the skill limit")
    partner_preferences: float = Field(default=1.0, ge=0.0, description="Declared partners never paired")


class SearchSettings(BaseModel):
    """Settings for the randomized multi-restart search."""
    iterations: int = Field(default=1500, ge=1, description="Independent construction attempts")
    yield_every: int = Field(default=100, ge=1, description="Attempts between progress callbacks")
    timeout_seconds: Optional[float] = Field(default=None, gt=0.0, description="Stop after this many seconds")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible runs")


class PlayerEntry(BaseModel):
    """A roster row as it appears in the configuration file."""
    id: str
    name: str
    skill_level: float = Field(default=3.0, description="Skill rating, e.g. 1.0-5.0")
    partner_id: Optional[str] = Field(default=None, description="Preferred partner's id")
    active: bool = True

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        if not v.strip():
            raise ValueError("Player id must not be empty")
        return v


class SchedulerConfig(BaseModel):
    """Main configuration for the doubles scheduler."""
    timezone: str = Field(default="UTC", description="Timezone for the generation timestamp")
    event_label: str = Field(default="", description="Event label carried on the schedule")
    players: List[PlayerEntry] = Field(default_factory=list, description="Roster")

    options: MatchingOptions = Field(default_factory=MatchingOptions)
    search: SearchSettings = Field(default_factory=SearchSettings)
    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        try:
            pytz.timezone(v)
            return v
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")

    @model_validator(mode='after')
    def validate_unique_ids(self):
        seen = set()
        for entry in self.players:
            if entry.id in seen:
                raise ValueError(f"Duplicate player id: {entry.id}")
            seen.add(entry.id)
        return self

    def get_player_ids(self, active_only: bool = True) -> List[str]:
        """Get roster ids, optionally only the active ones."""
        return [p.id for p in self.players if p.active or not active_only]

    def get_player_entry(self, player_id: str) -> Optional[PlayerEntry]:
        """Get the roster entry for a player id."""
        for entry in self.players:
            if entry.id == player_id:
                return entry
        return None


MIN_COURTS = 1
MAX_COURTS = 4
MIN_ROUNDS = 1
MAX_ROUNDS = 15
MAX_SKILL_DIFFERENCE_LIMIT = 8.0
MAX_SITTERS_PER_ROUND = 4


def validate_options(options: MatchingOptions, active_player_count: int) -> List[str]:
    """
    Check options against the limits an organiser would expect.

    The engine itself accepts anything; this is for callers that want to
    reject odd input before generating.

    Args:
        options: Matching options to check
        active_player_count: Number of active players on the roster

    Returns:
        List[str]: Error messages, empty when the options are sensible
    """
    errors = []
    courts = options.number_of_courts

    min_players = courts * 4
    if active_player_count < min_players:
        errors.append(f"Need at least {min_players} active players for {courts} courts")

    max_players = courts * 4 + MAX_SITTERS_PER_ROUND
    if active_player_count > max_players:
        errors.append(f"Too many players for {courts} courts. Maximum {max_players} players")

    if courts < MIN_COURTS or courts > MAX_COURTS:
        errors.append(f"Number of courts must be between {MIN_COURTS} and {MAX_COURTS}")

    if options.number_of_rounds < MIN_ROUNDS or options.number_of_rounds > MAX_ROUNDS:
        errors.append(f"Number of rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")

    if options.max_skill_difference < 0 or options.max_skill_difference > MAX_SKILL_DIFFERENCE_LIMIT:
        errors.append(f"Maximum skill difference must be between 0 and {MAX_SKILL_DIFFERENCE_LIMIT:g}")

    return errors


def load_config(config_path: str) -> SchedulerConfig:
    """Load configuration from YAML file."""
    import yaml

    with open(config_path, 'r') as f:
        config_data = yaml.safe_load(f) or {}

    return SchedulerConfig(**config_data)


def save_config(config: SchedulerConfig, config_path: str) -> None:
    """Save configuration to YAML file."""
    import yaml

    with open(config_path, 'w') as f:
        yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, indent=2, sort_keys=False)
