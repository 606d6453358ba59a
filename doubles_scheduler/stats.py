"""
Per-player participation statistics for a generated schedule.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .models import GameSchedule, Player, PlayerStats


def compute_player_stats(schedule: GameSchedule, players: Sequence[Player]) -> Dict[str, PlayerStats]:
    """
    Count games, rests, partners and opponents for every rostered player.

    Args:
        schedule: Generated schedule
        players: Roster the schedule was built from

    Returns:
        Dict[str, PlayerStats]: Stats keyed by player id, in roster order
    """
    stats = {p.id: PlayerStats(player_id=p.id) for p in players}
    partners: Dict[str, Counter] = {p.id: Counter() for p in players}
    opponents: Dict[str, Counter] = {p.id: Counter() for p in players}

    for round_number, resting in enumerate(schedule.resting_players, start=1):
        for pid in resting:
            if pid in stats:
                stats[pid].rounds_rested += 1
                stats[pid].rest_rounds.append(round_number)

    for game in schedule.games:
        for pid in game.players:
            if pid not in stats:
                continue
            stats[pid].games_played += 1
            partners[pid][game.partner_of(pid)] += 1
            for opponent in game.opponents_of(pid):
                opponents[pid][opponent] += 1

    for pid, player_stats in stats.items():
        player_stats.partner_counts = dict(partners[pid])
        player_stats.opponent_counts = dict(opponents[pid])
        player_stats.partnered_with = sorted(partners[pid])
        player_stats.played_against = sorted(opponents[pid])

    return stats


def player_stats_dataframe(stats: Dict[str, PlayerStats],
                           names: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """Tabulate player stats, one row per player, with display names when given."""
    if not stats:
        return pd.DataFrame()

    rows: List[Dict] = []
    for player_stats in stats.values():
        row = player_stats.to_dict()
        if names is not None:
            row['Player'] = names.get(player_stats.player_id, player_stats.player_id)
        rows.append(row)

    return pd.DataFrame(rows)
