"""
Pairing pass: split a round's playing players into two-player teams.
"""

import random
from typing import Dict, List, Sequence

from ..config import MatchingOptions
from ..history import RoundHistory
from ..models import Player, Team, lookup_player

NEW_PARTNER_BONUS = 2000.0
REPEAT_PARTNER_PENALTY = 1000.0
SKILL_BALANCE_WEIGHT = 10.0
PREFERENCE_BONUS = 200.0

DEFAULT_MID_SKILL = 3.5


def roster_mid_skill(players: Sequence[Player]) -> float:
    """Get the skill a balanced pair should average: the roster mean."""
    if not players:
        return DEFAULT_MID_SKILL
    return sum(p.skill_level for p in players) / len(players)


def score_partner(p1: Player, p2: Player, history: RoundHistory,
                  options: MatchingOptions, mid_skill: float) -> float:
    """Score ``p2`` as a partner for ``p1`` (higher is better)."""
    score = 0.0

    # New partnerships outweigh every other pairing concern.
    if history.has_partnered(p1.id, p2.id):
        score -= REPEAT_PARTNER_PENALTY
    else:
        score += NEW_PARTNER_BONUS

    if options.balance_skill_levels:
        avg_skill = (p1.skill_level + p2.skill_level) / 2
        score += (mid_skill - abs(avg_skill - mid_skill)) * SKILL_BALANCE_WEIGHT

    if options.respect_partner_preferences:
        if p1.prefers(p2.id) or p2.prefers(p1.id):
            score += PREFERENCE_BONUS

    return score


def create_pairs(player_ids: Sequence[str], players_by_id: Dict[str, Player],
                 history: RoundHistory, options: MatchingOptions,
                 mid_skill: float, rng: random.Random) -> List[Team]:
    """
    Pair players greedily, preferring unseen partners.

    The pool is shuffled, then the first remaining player takes the best
    scoring partner until the pool is empty.

    Args:
        player_ids: Players taking part in the round
        players_by_id: Roster lookup
        history: Partner history for this attempt
        options: Matching options
        mid_skill: Skill a balanced pair should average
        rng: Random source for the shuffle

    Returns:
        List[Team]: Disjoint teams covering the pool
    """
    pool = list(player_ids)
    rng.shuffle(pool)
    pairs: List[Team] = []

    while len(pool) >= 2:
        p1 = lookup_player(players_by_id, pool.pop(0))

        best_partner = None
        best_score = float('-inf')
        for candidate_id in pool:
            p2 = lookup_player(players_by_id, candidate_id)
            score = score_partner(p1, p2, history, options, mid_skill)
            if score > best_score:
                best_score = score
                best_partner = candidate_id

        if best_partner is None:
            # Nothing scored (e.g. NaN ratings); take the next player.
            best_partner = pool[0]

        pool.remove(best_partner)
        pairs.append((p1.id, best_partner))

    return pairs
