"""
Matching pass: set teams against each other.

Each team is matched in two tiers. The strict tier drops opponents whose
skill total differs by more than ``max_skill_difference`` (only when skill
balancing is on). If that leaves nobody, the relaxed tier scores every
remaining team the same way without the filter, so no team goes unmatched.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..config import MatchingOptions
from ..history import RoundHistory
from ..models import Matchup, Player, Team, lookup_player

OPPONENT_REPEAT_PENALTY = 200.0
LAST_GAME_PENALTY = 100.0
PREVIOUS_GAME_PENALTY = 50.0
SKILL_DIFFERENCE_WEIGHT = 20.0


def team_skill(team: Team, players_by_id: Dict[str, Player]) -> float:
    return sum(lookup_player(players_by_id, pid).skill_level for pid in team)


def within_skill_limit(skill_diff: float, options: MatchingOptions) -> bool:
    """Strict-tier predicate: is this skill gap allowed?"""
    if not options.balance_skill_levels:
        return True
    return skill_diff <= options.max_skill_difference


def score_opponent(team1: Team, team2: Team, skill_diff: float,
                   history: RoundHistory, options: MatchingOptions) -> float:
    """Score ``team2`` as the opponent of ``team1`` (higher is better)."""
    score = -history.team_opponent_count(team1, team2) * OPPONENT_REPEAT_PENALTY

    last_hits, previous_hits = history.recent_opponent_hits(team1, team2)
    score -= last_hits * LAST_GAME_PENALTY + previous_hits * PREVIOUS_GAME_PENALTY

    if options.balance_skill_levels:
        score -= skill_diff * SKILL_DIFFERENCE_WEIGHT

    return score


def best_opponent(team1: Team, candidates: Sequence[Team], players_by_id: Dict[str, Player],
                  history: RoundHistory, options: MatchingOptions,
                  strict: bool) -> Optional[Team]:
    """
    Pick the best opponent for ``team1`` from ``candidates``.

    Args:
        team1: Team looking for an opponent
        candidates: Unmatched teams
        players_by_id: Roster lookup
        history: Opponent history for this attempt
        options: Matching options
        strict: Apply the skill-gap filter

    Returns:
        Optional[Team]: Best opponent, or None if the filter excluded everyone
    """
    skill1 = team_skill(team1, players_by_id)

    best: Optional[Team] = None
    best_score = float('-inf')
    for team2 in candidates:
        skill_diff = abs(skill1 - team_skill(team2, players_by_id))
        if strict and not within_skill_limit(skill_diff, options):
            continue
        score = score_opponent(team1, team2, skill_diff, history, options)
        if score > best_score:
            best_score = score
            best = team2

    return best


def match_pairs(pairs: Sequence[Team], players_by_id: Dict[str, Player],
                history: RoundHistory, options: MatchingOptions) -> List[Matchup]:
    """
    Match teams against each other in list order.

    Returns:
        List[Matchup]: Disjoint matchups covering every team (court unset)
    """
    available = list(pairs)
    matchups: List[Matchup] = []

    while len(available) >= 2:
        team1 = available.pop(0)

        opponent = best_opponent(team1, available, players_by_id, history, options, strict=True)
        if opponent is None:
            opponent = best_opponent(team1, available, players_by_id, history, options, strict=False)
        if opponent is None:
            opponent = available[0]

        available.remove(opponent)
        matchups.append(Matchup(team1=team1, team2=opponent))

    return matchups


def relaxed_matchups(matchups: Sequence[Matchup], players_by_id: Dict[str, Player],
                     options: MatchingOptions) -> List[Tuple[Matchup, float]]:
    """List matchups over the skill limit with their skill gap."""
    over = []
    for m in matchups:
        diff = abs(team_skill(m.team1, players_by_id) - team_skill(m.team2, players_by_id))
        if not within_skill_limit(diff, options):
            over.append((m, diff))
    return over
