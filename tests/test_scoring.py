"""
Tests for schedule scoring.
"""

import math
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).parent.parent))

from doubles_scheduler.config import MatchingOptions, ScoreWeights
from doubles_scheduler.models import GameSchedule, Player
from doubles_scheduler.scoring import (
    declared_partner_pairs, evaluate_score, score_breakdown, score_consecutive_courts,
    score_consecutive_opponents, score_opponent_repeats, score_partner_preferences,
    score_partner_repeats, score_rest_distribution, score_rest_spacing, score_skill_balance,
    score_skill_violations, unfulfilled_partner_pairs
)
from conftest import make_game, make_players


FOUR = ["p1", "p2", "p3", "p4"]


def same_game_schedule(rounds, court=1):
    """Four players meeting in the same teams every round."""
    return GameSchedule(
        rounds=[[make_game(r, court, ("p1", "p2"), ("p3", "p4"))] for r in range(1, rounds + 1)],
        resting_players=[[] for _ in range(rounds)],
        options=MatchingOptions(number_of_courts=1, number_of_rounds=rounds)
    )


def test_partner_repeats():
    assert score_partner_repeats(same_game_schedule(1)) == 0.0
    # two teams formed twice: 2 ** 1 each
    assert score_partner_repeats(same_game_schedule(2)) == 4.0
    # two teams formed three times: 2 ** 2 each
    assert score_partner_repeats(same_game_schedule(3)) == 8.0


def test_opponent_repeats():
    """Meeting the same opponent twice is free; the third meeting costs."""
    assert score_opponent_repeats(same_game_schedule(2)) == 0.0
    assert score_opponent_repeats(same_game_schedule(3)) == 8.0


def test_consecutive_opponents():
    players = make_players(4)
    assert score_consecutive_opponents(same_game_schedule(1), players) == 0.0
    # each player: two opponents from last round
    assert score_consecutive_opponents(same_game_schedule(2), players) == 800.0
    # round 3 adds two last-round and two two-rounds-ago hits per player
    assert score_consecutive_opponents(same_game_schedule(3), players) == 1840.0


def test_consecutive_opponents_skip_rest_rounds():
    """A rest round breaks the back-to-back chain."""
    players = make_players(8)
    schedule = GameSchedule(
        rounds=[
            [make_game(1, 1, ("p1", "p2"), ("p3", "p4"))],
            [make_game(2, 1, ("p5", "p6"), ("p7", "p8"))],
            [make_game(3, 1, ("p1", "p2"), ("p3", "p4"))],
        ],
        resting_players=[["p5", "p6", "p7", "p8"], FOUR, ["p5", "p6", "p7", "p8"]],
        options=MatchingOptions(number_of_courts=1, number_of_rounds=3)
    )

    # only the two-rounds-ago term applies: 4 players x 2 opponents x 30
    assert score_consecutive_opponents(schedule, players) == 240.0


def test_consecutive_courts():
    players = make_players(4)
    assert score_consecutive_courts(same_game_schedule(2), players) == 200.0
    assert score_consecutive_courts(same_game_schedule(3), players) == 800.0

    alternating = GameSchedule(
        rounds=[[make_game(r, c, ("p1", "p2"), ("p3", "p4"))] for r, c in [(1, 1), (2, 2), (3, 1)]],
        resting_players=[[], [], []]
    )
    assert score_consecutive_courts(alternating, players) == 0.0


def test_rest_distribution_and_spacing():
    players = make_players(4)
    schedule = GameSchedule(
        rounds=[[], [], [], []],
        resting_players=[["p1"], ["p2"], ["p1"], ["p1"]]
    )

    # p1 rested three times, p3 and p4 never
    assert score_rest_distribution(schedule, players) == 3.0
    # p1 gaps are 2 and 1: variance 0.25
    assert score_rest_spacing(schedule, players) == pytest.approx(0.25)


def test_even_rest_spacing_is_free():
    players = make_players(2)
    schedule = GameSchedule(
        rounds=[[], [], [], [], []],
        resting_players=[["p1"], ["p2"], ["p1"], ["p2"], ["p1"]]
    )
    assert score_rest_spacing(schedule, players) == 0.0


def test_skill_terms():
    schedule = GameSchedule(
        rounds=[[
            make_game(1, 1, ("p1", "p2"), ("p3", "p4"), 6.0, 5.5),
            make_game(1, 2, ("p5", "p6"), ("p7", "p8"), 8.0, 5.0),
        ]],
        resting_players=[[]]
    )

    assert score_skill_balance(schedule) == 3.5
    # only the second game exceeds 1.0: 2 ** (3 - 1)
    assert score_skill_violations(schedule, 1.0) == 4.0


def test_skill_violation_overflow_is_infinite():
    """A huge excess over the limit scores infinity instead of overflowing."""
    schedule = GameSchedule(
        rounds=[[make_game(1, 1, ("p1", "p2"), ("p3", "p4"), 6.0, 6.0)]],
        resting_players=[[]],
        options=MatchingOptions(number_of_courts=1, max_skill_difference=-2000)
    )

    assert math.isinf(score_skill_violations(schedule, -2000))
    assert math.isinf(evaluate_score(schedule, make_players(4)))

    # A zero weight still switches the term off
    terms = score_breakdown(schedule, make_players(4), ScoreWeights(skill_violations=0.0))
    assert terms['skill_violations']['weighted'] == 0.0


def test_partner_preferences():
    players = [
        Player(id="p1", name="A", skill_level=3.0, partner_id="p2"),
        Player(id="p2", name="B", skill_level=3.0, partner_id="p1"),
        Player(id="p3", name="C", skill_level=3.0, partner_id="p3"),
        Player(id="p4", name="D", skill_level=3.0, partner_id="ghost"),
        Player(id="p5", name="E", skill_level=3.0, partner_id="p4"),
    ]

    pairs = declared_partner_pairs(players)
    assert pairs == [frozenset(("p1", "p2")), frozenset(("p4", "p5"))]

    schedule = same_game_schedule(1)
    assert unfulfilled_partner_pairs(schedule, players) == [frozenset(("p4", "p5"))]
    assert score_partner_preferences(schedule, players) == 100.0


def test_breakdown_respects_toggles():
    players = make_players(4)
    schedule = same_game_schedule(2)
    schedule.options = MatchingOptions(
        number_of_courts=1,
        balance_skill_levels=False,
        respect_partner_preferences=False,
        distribute_rest_equally=False
    )

    terms = score_breakdown(schedule, players)

    assert 'skill_balance' not in terms
    assert 'skill_violations' not in terms
    assert 'partner_preferences' not in terms
    assert 'rest_distribution' not in terms
    assert terms['partner_repeats'] == {'raw': 4.0, 'weighted': 800.0}


def test_evaluate_score_is_weighted_sum():
    players = make_players(4)
    schedule = same_game_schedule(3)
    weights = ScoreWeights(partner_repeats=1.0, consecutive_opponents=0.0)

    terms = score_breakdown(schedule, players, weights)
    total = evaluate_score(schedule, players, weights)

    assert total == pytest.approx(sum(t['weighted'] for t in terms.values()))
    assert terms['consecutive_opponents']['weighted'] == 0.0
    assert total >= 0.0


def test_perfect_schedule_scores_zero():
    """One game and nobody resting leaves nothing to penalise."""
    assert evaluate_score(same_game_schedule(1), make_players(4)) == 0.0
