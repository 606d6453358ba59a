"""
Tests for player statistics and schedule summaries.
"""

from pathlib import Path
import sys

sys.path.append(str(Path(__file__).parent.parent))

from doubles_scheduler.config import MatchingOptions, SearchSettings
from doubles_scheduler.engine import generate_schedule
from doubles_scheduler.models import GameSchedule
from doubles_scheduler.stats import compute_player_stats, player_stats_dataframe
from conftest import make_game, make_players


def test_player_stats_counts():
    players = make_players(5)
    schedule = GameSchedule(
        rounds=[
            [make_game(1, 1, ("p1", "p2"), ("p3", "p4"))],
            [make_game(2, 1, ("p1", "p3"), ("p2", "p5"))],
        ],
        resting_players=[["p5"], ["p4"]]
    )

    stats = compute_player_stats(schedule, players)

    assert stats["p1"].games_played == 2
    assert stats["p1"].rounds_rested == 0
    assert stats["p1"].partnered_with == ["p2", "p3"]
    assert stats["p1"].opponent_counts == {"p3": 1, "p4": 1, "p2": 1, "p5": 1}
    assert stats["p2"].opponent_counts["p3"] == 2
    assert stats["p4"].rest_rounds == [2]
    assert stats["p5"].rest_rounds == [1]
    assert stats["p5"].games_played == 1


def test_stats_add_up(sixteen_players, sixteen_options):
    schedule = generate_schedule(sixteen_players, sixteen_options, search=SearchSettings(iterations=5, seed=3))
    stats = compute_player_stats(schedule, sixteen_players)

    for player_stats in stats.values():
        assert player_stats.games_played + player_stats.rounds_rested == 8
        assert sum(player_stats.partner_counts.values()) == player_stats.games_played
        assert sum(player_stats.opponent_counts.values()) == 2 * player_stats.games_played


def test_player_stats_dataframe(sixteen_players, sixteen_options):
    schedule = generate_schedule(sixteen_players, sixteen_options, search=SearchSettings(iterations=5, seed=3))
    names = {p.id: p.name for p in sixteen_players}

    df = player_stats_dataframe(compute_player_stats(schedule, sixteen_players), names)

    assert len(df) == 16
    assert "Alice" in list(df['Player'])
    assert set(df['Rounds Rested']) == {2}
    assert player_stats_dataframe({}).empty


def test_schedule_summary(sixteen_players, sixteen_options):
    schedule = generate_schedule(sixteen_players, sixteen_options, search=SearchSettings(iterations=5, seed=3))

    summary = schedule.get_summary_stats()
    assert summary['total_games'] == 24
    assert summary['total_rounds'] == 8
    assert summary['players_per_round'] == 12
    assert summary['resting_per_round'] == 4
    assert summary['score'] == schedule.score

    df = schedule.to_dataframe({p.id: p.name for p in sixteen_players})
    assert len(df) == 24
    assert list(df.columns[:4]) == ['Round', 'Court', 'Team 1', 'Team 2']
    assert " & " in df.loc[0, 'Team 1']


def test_round_lookups():
    schedule = GameSchedule(
        rounds=[[make_game(1, 1, ("p1", "p2"), ("p3", "p4"))]],
        resting_players=[["p5"]],
        options=MatchingOptions(number_of_courts=1)
    )

    assert len(schedule.get_games_for_round(1)) == 1
    assert schedule.get_games_for_round(0) is None
    assert schedule.get_games_for_round(2) is None
    assert schedule.get_resting_players_for_round(1) == ["p5"]
    assert schedule.get_resting_players_for_round(2) is None
    assert len(schedule.get_player_games("p3")) == 1
    assert schedule.games[0].partner_of("p3") == "p4"


def test_empty_schedule_summary():
    summary = GameSchedule().get_summary_stats()

    assert summary['total_games'] == 0
    assert summary['average_skill_difference'] == 0.0
    assert GameSchedule().to_dataframe().empty
