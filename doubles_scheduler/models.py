"""
Data models for the doubles scheduler.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple
import pandas as pd

from .config import MatchingOptions
from .exceptions import ScheduleConstructionError

# Two player ids playing on the same side of the net.
Team = Tuple[str, str]


@dataclass
class Player:
    """A player on the roster."""
    id: str
    name: str
    skill_level: float
    partner_id: Optional[str] = None
    active: bool = True

    def prefers(self, other_id: str) -> bool:
        """Whether this player declared ``other_id`` as preferred partner."""
        return self.partner_id is not None and self.partner_id != self.id and self.partner_id == other_id


def lookup_player(players_by_id: Dict[str, Player], player_id: str) -> Player:
    """Get a player by id, failing the current construction attempt if unknown."""
    try:
        return players_by_id[player_id]
    except KeyError:
        raise ScheduleConstructionError(f"Unknown player id {player_id}") from None


@dataclass
class Matchup:
    """Two teams set to face each other, optionally placed on a court."""
    team1: Team
    team2: Team
    court: Optional[int] = None

    @property
    def players(self) -> List[str]:
        """Get all four player ids."""
        return [*self.team1, *self.team2]


@dataclass
class Game:
    """A doubles game on one court in one round."""
    round: int
    court: int
    team1: Team
    team2: Team
    team1_skill_level: float
    team2_skill_level: float
    skill_difference: float
    game_id: Optional[str] = None

    def __post_init__(self):
        if self.game_id is None:
            self.game_id = f"g-{self.round}-{self.court}"

    @property
    def players(self) -> List[str]:
        """Get all four player ids."""
        return [*self.team1, *self.team2]

    def has_player(self, player_id: str) -> bool:
        return player_id in self.team1 or player_id in self.team2

    def partner_of(self, player_id: str) -> Optional[str]:
        """Get the teammate of a player in this game."""
        if player_id == self.team1[0]:
            return self.team1[1]
        if player_id == self.team1[1]:
            return self.team1[0]
        if player_id == self.team2[0]:
            return self.team2[1]
        if player_id == self.team2[1]:
            return self.team2[0]
        return None

    def opponents_of(self, player_id: str) -> Tuple[str, ...]:
        """Get the players on the other side of the net."""
        if player_id in self.team1:
            return self.team2
        if player_id in self.team2:
            return self.team1
        return ()


@dataclass
class GameSchedule:
    """A complete multi-round schedule."""
    rounds: List[List[Game]] = field(default_factory=list)
    resting_players: List[List[str]] = field(default_factory=list)
    event_label: str = ""
    options: MatchingOptions = field(default_factory=MatchingOptions)
    generated_at: datetime = field(default_factory=datetime.now)
    score: Optional[float] = None
    attempts: int = 0

    @property
    def games(self) -> List[Game]:
        """Get every game in round order."""
        return [game for round_games in self.rounds for game in round_games]

    def get_games_for_round(self, round_number: int) -> Optional[List[Game]]:
        """Get the games of a 1-based round, or None when out of range."""
        if round_number < 1 or round_number > len(self.rounds):
            return None
        return self.rounds[round_number - 1]

    def get_resting_players_for_round(self, round_number: int) -> Optional[List[str]]:
        """Get the resting players of a 1-based round, or None when out of range."""
        if round_number < 1 or round_number > len(self.resting_players):
            return None
        return self.resting_players[round_number - 1]

    def get_player_games(self, player_id: str) -> List[Game]:
        """Get all games for a specific player."""
        return [game for game in self.games if game.has_player(player_id)]

    def to_dataframe(self, names: Optional[Dict[str, str]] = None) -> pd.DataFrame:
        """Convert schedule to pandas DataFrame, one row per game."""
        if not self.games:
            return pd.DataFrame()

        def label(team: Team) -> str:
            if names is None:
                return " & ".join(team)
            return " & ".join(names.get(pid, pid) for pid in team)

        data = []
        for game in self.games:
            data.append({
                'Round': game.round,
                'Court': game.court,
                'Team 1': label(game.team1),
                'Team 2': label(game.team2),
                'Team 1 Skill': game.team1_skill_level,
                'Team 2 Skill': game.team2_skill_level,
                'Skill Difference': game.skill_difference,
                'Game ID': game.game_id
            })

        df = pd.DataFrame(data)
        return df.sort_values(['Round', 'Court']).reset_index(drop=True)

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get summary statistics for the schedule."""
        stats = {
            'total_games': len(self.games),
            'total_rounds': len(self.rounds),
            'players_per_round': len(self.rounds[0]) * 4 if self.rounds else 0,
            'resting_per_round': len(self.resting_players[0]) if self.resting_players else 0,
            'average_skill_difference': 0.0,
            'generated_at': self.generated_at,
            'score': self.score,
        }

        if self.games:
            df = self.to_dataframe()
            stats['average_skill_difference'] = round(float(df['Skill Difference'].mean()), 2)

        return stats


@dataclass
class PlayerStats:
    """Participation statistics for one player."""
    player_id: str
    games_played: int = 0
    rounds_rested: int = 0
    rest_rounds: List[int] = field(default_factory=list)
    partnered_with: List[str] = field(default_factory=list)
    played_against: List[str] = field(default_factory=list)
    partner_counts: Dict[str, int] = field(default_factory=dict)
    opponent_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary for tabular output."""
        return {
            'Player': self.player_id,
            'Games Played': self.games_played,
            'Rounds Rested': self.rounds_rested,
            'Rest Rounds': ", ".join(str(r) for r in self.rest_rounds),
            'Distinct Partners': len(self.partnered_with),
            'Distinct Opponents': len(self.played_against),
            'Max Partner Repeats': max(self.partner_counts.values(), default=0),
            'Max Opponent Repeats': max(self.opponent_counts.values(), default=0),
        }
