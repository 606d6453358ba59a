"""
Shared fixtures for the doubles scheduler tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent))

from doubles_scheduler.config import MatchingOptions
from doubles_scheduler.models import Game, Player


ROSTER_16 = [
    ("1", "Alice", 2.75, "2"),
    ("2", "Bob", 3.25, "1"),
    ("3", "Charlie", 3.0, "4"),
    ("4", "Diana", 3.25, "3"),
    ("5", "Eve", 3.5, None),
    ("6", "Frank", 3.25, None),
    ("7", "Grace", 3.0, "8"),
    ("8", "Henry", 2.75, "7"),
    ("9", "Ivy", 3.5, None),
    ("10", "Jack", 3.75, None),
    ("11", "Kate", 3.5, None),
    ("12", "Liam", 3.0, None),
    ("13", "Mia", 3.5, None),
    ("14", "Noah", 3.75, None),
    ("15", "Olivia", 2.75, "16"),
    ("16", "Peter", 3.0, "15"),
]


def make_players(count, skill=3.0):
    """Players p1..pN with equal skill and no partner preference."""
    return [Player(id=f"p{i}", name=f"Player {i}", skill_level=skill) for i in range(1, count + 1)]


def make_game(round_number, court, team1, team2, skill1=6.0, skill2=6.0):
    return Game(
        round=round_number,
        court=court,
        team1=tuple(team1),
        team2=tuple(team2),
        team1_skill_level=skill1,
        team2_skill_level=skill2,
        skill_difference=abs(skill1 - skill2)
    )


@pytest.fixture
def sixteen_players():
    return [Player(id=i, name=n, skill_level=s, partner_id=p) for i, n, s, p in ROSTER_16]


@pytest.fixture
def sixteen_options():
    return MatchingOptions(
        number_of_courts=3,
        number_of_rounds=8,
        balance_skill_levels=True,
        respect_partner_preferences=True,
        max_skill_difference=1.5,
        distribute_rest_equally=True
    )
