"""
Roster ingestion for the doubles scheduler.
"""

import logging
from typing import Dict, List

import pandas as pd

from .config import SchedulerConfig
from .models import Player

logger = logging.getLogger(__name__)


def create_players_from_config(config: SchedulerConfig, active_only: bool = True) -> List[Player]:
    """
    Create Player objects from configuration.

    Args:
        config: Scheduler configuration
        active_only: Skip players marked inactive

    Returns:
        List[Player]: Players in roster order
    """
    players = []
    roster_ids = {entry.id for entry in config.players}

    for entry in config.players:
        if active_only and not entry.active:
            continue

        if entry.partner_id is not None and entry.partner_id not in roster_ids:
            logger.warning("Player %s prefers unknown partner %s; ignoring", entry.id, entry.partner_id)

        players.append(Player(
            id=entry.id,
            name=entry.name,
            skill_level=entry.skill_level,
            partner_id=entry.partner_id,
            active=entry.active
        ))

    return players


def player_names(players: List[Player]) -> Dict[str, str]:
    """Map player ids to display names."""
    return {p.id: p.name for p in players}


def get_roster_summary(players: List[Player]) -> Dict:
    """
    Get summary statistics for a roster.

    Args:
        players: List of players

    Returns:
        Dict: Summary statistics
    """
    if not players:
        return {}

    df = pd.DataFrame([
        {
            'id': p.id,
            'skill': p.skill_level,
            'has_partner': p.partner_id is not None,
            'active': p.active
        }
        for p in players
    ])

    summary = {
        'total_players': len(players),
        'active_players': int(df['active'].sum()),
        'with_partner_preference': int(df['has_partner'].sum()),
        'skill_range': {
            'min': float(df['skill'].min()),
            'max': float(df['skill'].max())
        },
        'avg_skill': round(float(df['skill'].mean()), 2),
        'skill_distribution': df['skill'].value_counts().sort_index().to_dict()
    }

    return summary
