"""
History accumulators for a single schedule construction attempt.

Players are mapped to dense integer indices when the history is created, and
partner, opponent and court records are kept in parallel lists indexed by
those integers. A history is never shared between attempts.
"""

from collections import deque
from typing import Deque, Dict, Iterable, List, Sequence, Tuple

from .exceptions import ScheduleConstructionError
from .models import Game, Team

RECENT_ROUNDS = 2


class RoundHistory:
    """Partner, opponent and court records built up round by round."""

    def __init__(self, player_ids: Sequence[str]):
        self.player_ids: List[str] = list(player_ids)
        self.index: Dict[str, int] = {pid: i for i, pid in enumerate(self.player_ids)}
        n = len(self.player_ids)

        self.partnered: List[List[bool]] = [[False] * n for _ in range(n)]
        self.opponent_counts: List[List[int]] = [[0] * n for _ in range(n)]
        # Opponents of each of the last two games a player took part in, oldest first.
        self.recent_opponents: List[Deque[Tuple[int, ...]]] = [
            deque(maxlen=RECENT_ROUNDS) for _ in range(n)
        ]
        self.courts: List[List[int]] = [[] for _ in range(n)]

    def _idx(self, player_id: str) -> int:
        try:
            return self.index[player_id]
        except KeyError:
            raise ScheduleConstructionError(f"Unknown player id {player_id}") from None

    def has_partnered(self, a: str, b: str) -> bool:
        return self.partnered[self._idx(a)][self._idx(b)]

    def partners_of(self, player_id: str) -> List[str]:
        row = self.partnered[self._idx(player_id)]
        return [self.player_ids[j] for j, seen in enumerate(row) if seen]

    def opponent_count(self, a: str, b: str) -> int:
        return self.opponent_counts[self._idx(a)][self._idx(b)]

    def team_opponent_count(self, team1: Team, team2: Team) -> int:
        """Total prior meetings between every player of team1 and every player of team2."""
        return sum(self.opponent_count(p1, p2) for p1 in team1 for p2 in team2)

    def recent_opponent_hits(self, team1: Team, team2: Team) -> Tuple[int, int]:
        """
        Count recent meetings between two teams.

        Returns:
            Tuple[int, int]: (hits in each player's last game, hits in the game before that)
        """
        last_hits = 0
        previous_hits = 0
        targets = [self._idx(p) for p in team2]
        for p1 in team1:
            recent = self.recent_opponents[self._idx(p1)]
            if len(recent) > 0:
                last = recent[-1]
                last_hits += sum(1 for t in targets if t in last)
            if len(recent) > 1:
                previous = recent[-2]
                previous_hits += sum(1 for t in targets if t in previous)
        return last_hits, previous_hits

    def court_history(self, player_id: str) -> List[int]:
        return self.courts[self._idx(player_id)]

    def record_game(self, game: Game) -> None:
        """Fold one game into every accumulator."""
        a1, a2 = (self._idx(p) for p in game.team1)
        b1, b2 = (self._idx(p) for p in game.team2)

        self.partnered[a1][a2] = self.partnered[a2][a1] = True
        self.partnered[b1][b2] = self.partnered[b2][b1] = True

        for p1 in (a1, a2):
            for p2 in (b1, b2):
                self.opponent_counts[p1][p2] += 1
                self.opponent_counts[p2][p1] += 1

        for p in (a1, a2):
            self.recent_opponents[p].append((b1, b2))
        for p in (b1, b2):
            self.recent_opponents[p].append((a1, a2))

        for p in (a1, a2, b1, b2):
            self.courts[p].append(game.court)

    def record_round(self, games: Iterable[Game]) -> None:
        for game in games:
            self.record_game(game)
