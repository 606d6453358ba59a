"""
Court pass: place each matchup of a round on its own court.
"""

import random
from typing import List, Sequence

from ..history import RoundHistory
from ..models import Matchup

LAST_COURT_PENALTY = 100.0
REPEATED_COURT_PENALTY = 200.0


def court_penalty(matchup: Matchup, court: int, history: RoundHistory) -> float:
    """Penalty for putting ``matchup`` on ``court`` given who played where before."""
    penalty = 0.0
    for pid in matchup.players:
        courts = history.court_history(pid)
        if len(courts) > 0 and courts[-1] == court:
            penalty += LAST_COURT_PENALTY
        if len(courts) > 1 and courts[-1] == court and courts[-2] == court:
            penalty += REPEATED_COURT_PENALTY
    return penalty


def assign_courts(matchups: Sequence[Matchup], number_of_courts: int,
                  history: RoundHistory, rng: random.Random) -> List[Matchup]:
    """
    Assign each matchup a court in ``1..number_of_courts``, never reusing one.

    Returns:
        List[Matchup]: New matchups with ``court`` set, in input order
    """
    used = set()
    assigned: List[Matchup] = []

    for matchup in matchups:
        best_court = None
        best_score = float('-inf')
        for court in range(1, number_of_courts + 1):
            if court in used:
                continue
            score = -court_penalty(matchup, court, history) + rng.random()
            if score > best_score:
                best_score = score
                best_court = court

        if best_court is None:
            # More matchups than courts; the round builder rejects this.
            break

        used.add(best_court)
        assigned.append(Matchup(team1=matchup.team1, team2=matchup.team2, court=best_court))

    return assigned
