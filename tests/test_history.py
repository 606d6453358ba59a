"""
Tests for per-attempt history tracking.
"""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).parent.parent))

from doubles_scheduler.exceptions import ScheduleConstructionError
from doubles_scheduler.history import RoundHistory
from doubles_scheduler.models import lookup_player
from conftest import make_game


def test_record_game():
    """Partners, opponents and courts are all recorded."""
    history = RoundHistory(["a", "b", "c", "d"])
    history.record_game(make_game(1, 2, ("a", "b"), ("c", "d")))

    assert history.has_partnered("a", "b")
    assert history.has_partnered("b", "a")
    assert not history.has_partnered("a", "c")
    assert history.partners_of("c") == ["d"]

    assert history.opponent_count("a", "c") == 1
    assert history.opponent_count("d", "b") == 1
    assert history.opponent_count("a", "b") == 0
    assert history.team_opponent_count(("a", "b"), ("c", "d")) == 4

    assert history.court_history("a") == [2]


def test_recent_opponents_window():
    """Only each player's last two games count as recent."""
    players = ["a", "b", "c", "d", "e", "f", "g", "h"]
    history = RoundHistory(players)

    history.record_round([make_game(1, 1, ("a", "b"), ("c", "d")), make_game(1, 2, ("e", "f"), ("g", "h"))])
    assert history.recent_opponent_hits(("a", "e"), ("c", "g")) == (2, 0)

    history.record_round([make_game(2, 1, ("a", "e"), ("b", "f")), make_game(2, 2, ("c", "g"), ("d", "h"))])
    assert history.recent_opponent_hits(("a", "b"), ("c", "d")) == (0, 4)

    history.record_round([make_game(3, 1, ("a", "g"), ("b", "h")), make_game(3, 2, ("c", "e"), ("d", "f"))])
    # Round 1 has dropped out of the window
    assert history.recent_opponent_hits(("a", "b"), ("c", "d")) == (0, 0)


def test_court_history_accumulates():
    history = RoundHistory(["a", "b", "c", "d"])
    for r, court in enumerate([1, 2, 2], start=1):
        history.record_game(make_game(r, court, ("a", "b"), ("c", "d")))

    assert history.court_history("d") == [1, 2, 2]


def test_unknown_player():
    """Unknown ids abort the attempt with a construction error."""
    history = RoundHistory(["a", "b"])
    with pytest.raises(ScheduleConstructionError, match="Unknown player id"):
        history.has_partnered("a", "zz")


def test_unknown_player_error_not_chained():
    """The lookup KeyError is hidden from the construction error's traceback."""
    history = RoundHistory(["a"])
    with pytest.raises(ScheduleConstructionError) as exc_info:
        history.court_history("zz")
    assert exc_info.value.__cause__ is None
    assert exc_info.value.__suppress_context__

    with pytest.raises(ScheduleConstructionError) as exc_info:
        lookup_player({}, "zz")
    assert exc_info.value.__suppress_context__
