"""
Rest scheduling: decide who sits out each round.
"""

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Round index used for players who have not rested yet.
NEVER_RESTED = -100

DEFICIT_WEIGHT = 1000.0
SPACING_WEIGHT = 10.0
JITTER = 0.1


def resolve_forced_sitters(forced: Optional[Sequence[str]], player_ids: Sequence[str],
                           slots: int) -> Tuple[List[str], List[str]]:
    """
    Reconcile caller-specified round-1 sitters with the roster and slot count.

    Ids not on the roster are ignored. When more forced sitters remain than
    there are slots, the first ``slots`` are kept in the order given and the
    rest are dropped.

    Args:
        forced: Player ids requested to sit out round 1
        player_ids: Roster ids
        slots: Sitter slots available in round 1

    Returns:
        Tuple[List[str], List[str]]: (kept sitters, dropped sitters)
    """
    if not forced:
        return [], []

    roster = set(player_ids)
    known = []
    for pid in forced:
        if pid not in roster:
            logger.warning("Ignoring forced sitter %s: not on the active roster", pid)
            continue
        if pid not in known:
            known.append(pid)

    slots = max(0, slots)
    kept, dropped = known[:slots], known[slots:]
    if dropped:
        logger.warning(
            "%d forced round-1 sitters requested but only %d slots; dropped %d: %s",
            len(known), slots, len(dropped), ", ".join(dropped)
        )
    return kept, dropped


def select_sitters(candidates: Sequence[str], count: int, current_round: int,
                   rest_counts: Dict[str, int], last_rest_round: Dict[str, int],
                   target_average: float, distribute_equally: bool,
                   rng: random.Random) -> List[str]:
    """
    Pick the players who sit out ``current_round`` and record their rest.

    Players below their fair share of rest score highest, then those who have
    gone longest without resting. Jitter only breaks exact ties.
    """
    scored = []
    for pid in candidates:
        score = 0.0
        if distribute_equally:
            deficit = target_average - rest_counts.get(pid, 0)
            score += deficit * DEFICIT_WEIGHT
        score += (current_round - last_rest_round.get(pid, NEVER_RESTED)) * SPACING_WEIGHT
        score += rng.random() * JITTER
        scored.append((score, pid))

    scored.sort(key=lambda item: item[0], reverse=True)
    selected = [pid for _, pid in scored[:max(0, count)]]

    for pid in selected:
        rest_counts[pid] = rest_counts.get(pid, 0) + 1
        last_rest_round[pid] = current_round

    return selected


def build_rest_schedule(player_ids: Sequence[str], sitters_per_round: int, number_of_rounds: int,
                        distribute_equally: bool = True,
                        first_round_sitters: Optional[Sequence[str]] = None,
                        rng: Optional[random.Random] = None) -> List[List[str]]:
    """
    Build the sitter list for every round.

    Args:
        player_ids: Roster ids
        sitters_per_round: Players who must sit each round (<= 0 means nobody sits)
        number_of_rounds: Rounds to plan
        distribute_equally: Weight rest deficits so rest counts stay level
        first_round_sitters: Optional ids forced to sit out round 1
        rng: Random source for tie-breaking

    Returns:
        List[List[str]]: Sitters for each round, in round order
    """
    rng = rng or random.Random()
    rounds = max(0, number_of_rounds)

    if sitters_per_round <= 0:
        if first_round_sitters:
            logger.warning("No sitter slots available; ignoring %d forced sitters", len(first_round_sitters))
        return [[] for _ in range(rounds)]

    rest_counts = {pid: 0 for pid in player_ids}
    last_rest_round = {pid: NEVER_RESTED for pid in player_ids}
    target_average = (rounds * sitters_per_round) / len(player_ids) if player_ids else 0.0

    rest_matrix: List[List[str]] = []
    for r in range(rounds):
        if r == 0 and first_round_sitters:
            forced, _ = resolve_forced_sitters(first_round_sitters, player_ids, sitters_per_round)
            for pid in forced:
                rest_counts[pid] += 1
                last_rest_round[pid] = r

            remaining = sitters_per_round - len(forced)
            extra = []
            if remaining > 0:
                available = [pid for pid in player_ids if pid not in forced]
                extra = select_sitters(available, remaining, r, rest_counts, last_rest_round,
                                       target_average, distribute_equally, rng)
            sitters = forced + extra
        else:
            sitters = select_sitters(player_ids, sitters_per_round, r, rest_counts, last_rest_round,
                                     target_average, distribute_equally, rng)
        rest_matrix.append(sitters)

    return rest_matrix
