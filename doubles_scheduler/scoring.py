"""
Schedule scoring: a weighted sum of soft-constraint penalties (lower is better).

Priority between terms comes from the size of their weights; see
``ScoreWeights`` for the defaults.
"""

import math
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional, Sequence

from .config import ScoreWeights
from .models import Game, GameSchedule, Player

LAST_ROUND_OPPONENT = 100.0
TWO_ROUNDS_AGO_OPPONENT = 30.0
REPEAT_COURT = 50.0
THIRD_STRAIGHT_COURT = 100.0
UNPLAYED_PREFERENCE = 100.0

# Largest exponent 2 ** x survives as a float.
MAX_VIOLATION_EXPONENT = 1023.0


def _games_by_player(schedule: GameSchedule) -> Dict[str, Dict[int, Game]]:
    """Map player id -> {round index: game played in that round}."""
    index: Dict[str, Dict[int, Game]] = defaultdict(dict)
    for r, round_games in enumerate(schedule.rounds):
        for game in round_games:
            for pid in game.players:
                index[pid][r] = game
    return index


def _rest_rounds(schedule: GameSchedule, player_ids: Sequence[str]) -> Dict[str, List[int]]:
    rests: Dict[str, List[int]] = {pid: [] for pid in player_ids}
    for r, resting in enumerate(schedule.resting_players):
        for pid in resting:
            rests.setdefault(pid, []).append(r)
    return rests


def score_rest_distribution(schedule: GameSchedule, players: Sequence[Player]) -> float:
    """Spread between the most and least rested players."""
    rests = _rest_rounds(schedule, [p.id for p in players])
    if not rests:
        return 0.0
    counts = [len(r) for r in rests.values()]
    return float(max(counts) - min(counts))


def score_rest_spacing(schedule: GameSchedule, players: Sequence[Player]) -> float:
    """Sum over players of the variance of the gaps between their rest rounds."""
    total = 0.0
    for rounds in _rest_rounds(schedule, [p.id for p in players]).values():
        if len(rounds) < 2:
            continue
        gaps = [b - a for a, b in zip(rounds, rounds[1:])]
        mean = sum(gaps) / len(gaps)
        total += sum((g - mean) ** 2 for g in gaps) / len(gaps)
    return total


def score_partner_repeats(schedule: GameSchedule) -> float:
    """Exponential penalty for partnerships formed more than once."""
    counts: Dict[FrozenSet[str], int] = defaultdict(int)
    for game in schedule.games:
        counts[frozenset(game.team1)] += 1
        counts[frozenset(game.team2)] += 1
    return float(sum(2 ** (k - 1) for k in counts.values() if k > 1))


def score_opponent_repeats(schedule: GameSchedule) -> float:
    """Exponential penalty for players who face each other more than twice."""
    counts: Dict[FrozenSet[str], int] = defaultdict(int)
    for game in schedule.games:
        for p1 in game.team1:
            for p2 in game.team2:
                counts[frozenset((p1, p2))] += 1
    return float(sum(2 ** (k - 2) for k in counts.values() if k > 2))


def score_consecutive_opponents(schedule: GameSchedule, players: Sequence[Player]) -> float:
    """Penalty for meeting an opponent from one or two rounds earlier."""
    by_player = _games_by_player(schedule)
    penalty = 0.0
    for player in players:
        games = by_player.get(player.id, {})
        opponents = [
            set(games[r].opponents_of(player.id)) if r in games else set()
            for r in range(len(schedule.rounds))
        ]
        for i in range(1, len(opponents)):
            penalty += LAST_ROUND_OPPONENT * len(opponents[i] & opponents[i - 1])
            if i >= 2:
                penalty += TWO_ROUNDS_AGO_OPPONENT * len(opponents[i] & opponents[i - 2])
    return penalty


def score_consecutive_courts(schedule: GameSchedule, players: Sequence[Player]) -> float:
    """Penalty for playing the same court in back-to-back games."""
    by_player = _games_by_player(schedule)
    penalty = 0.0
    for player in players:
        games = by_player.get(player.id, {})
        courts = [games[r].court for r in sorted(games)]
        for i in range(1, len(courts)):
            if courts[i] == courts[i - 1]:
                penalty += REPEAT_COURT
                if i >= 2 and courts[i] == courts[i - 2]:
                    penalty += THIRD_STRAIGHT_COURT
    return penalty


def score_skill_balance(schedule: GameSchedule) -> float:
    return float(sum(game.skill_difference for game in schedule.games))


def score_skill_violations(schedule: GameSchedule, max_skill_difference: float) -> float:
    """Exponential penalty for each game over the skill limit."""
    total = 0.0
    for game in schedule.games:
        excess = game.skill_difference - max_skill_difference
        if excess <= 0:
            continue
        if excess > MAX_VIOLATION_EXPONENT:
            return math.inf
        total += 2 ** excess
    return total


def declared_partner_pairs(players: Sequence[Player]) -> List[FrozenSet[str]]:
    """Distinct partner preferences that point at another rostered player."""
    roster = {p.id for p in players}
    pairs: List[FrozenSet[str]] = []
    for player in players:
        if player.partner_id is None or player.partner_id == player.id:
            continue
        if player.partner_id not in roster:
            continue
        pair = frozenset((player.id, player.partner_id))
        if pair not in pairs:
            pairs.append(pair)
    return pairs


def unfulfilled_partner_pairs(schedule: GameSchedule, players: Sequence[Player]) -> List[FrozenSet[str]]:
    played = set()
    for game in schedule.games:
        played.add(frozenset(game.team1))
        played.add(frozenset(game.team2))
    return [pair for pair in declared_partner_pairs(players) if pair not in played]


def score_partner_preferences(schedule: GameSchedule, players: Sequence[Player]) -> float:
    """Penalty for each declared partner pair that never shared a team."""
    return UNPLAYED_PREFERENCE * len(unfulfilled_partner_pairs(schedule, players))


def score_breakdown(schedule: GameSchedule, players: Sequence[Player],
                    weights: Optional[ScoreWeights] = None) -> Dict[str, Dict[str, float]]:
    """
    Compute every enabled scoring term.

    Args:
        schedule: Schedule to score
        players: Active roster the schedule was built from
        weights: Term weights (defaults when omitted)

    Returns:
        Dict[str, Dict[str, float]]: term name -> {'raw': value, 'weighted': value * weight}
    """
    weights = weights or ScoreWeights()
    options = schedule.options
    raw: Dict[str, float] = {}

    if options.distribute_rest_equally:
        raw['rest_distribution'] = score_rest_distribution(schedule, players)
    raw['rest_spacing'] = score_rest_spacing(schedule, players)
    raw['partner_repeats'] = score_partner_repeats(schedule)
    raw['consecutive_opponents'] = score_consecutive_opponents(schedule, players)
    raw['opponent_repeats'] = score_opponent_repeats(schedule)
    raw['consecutive_courts'] = score_consecutive_courts(schedule, players)
    if options.balance_skill_levels:
        raw['skill_balance'] = score_skill_balance(schedule)
        raw['skill_violations'] = score_skill_violations(schedule, options.max_skill_difference)
    if options.respect_partner_preferences:
        raw['partner_preferences'] = score_partner_preferences(schedule, players)

    breakdown = {}
    for term, value in raw.items():
        weight = getattr(weights, term)
        # A zero weight switches the term off, even when it is infinite.
        breakdown[term] = {'raw': value, 'weighted': value * weight if weight else 0.0}
    return breakdown


def evaluate_score(schedule: GameSchedule, players: Sequence[Player],
                   weights: Optional[ScoreWeights] = None) -> float:
    """Score a schedule; lower is better and 0 is perfect."""
    breakdown = score_breakdown(schedule, players, weights)
    return sum(term['weighted'] for term in breakdown.values())
