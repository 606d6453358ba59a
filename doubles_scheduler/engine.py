"""
Core scheduling engine: randomized greedy construction with best-of-N search.
"""

import asyncio
import logging
import random
import threading
import time
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pytz

from .config import MatchingOptions, ScoreWeights, SearchSettings
from .exceptions import ScheduleConstructionError, ScheduleGenerationError
from .history import RoundHistory
from .models import Game, GameSchedule, Matchup, Player, lookup_player
from .rounds import assign_courts, build_rest_schedule, create_pairs, match_pairs, roster_mid_skill
from .rounds.matching import relaxed_matchups
from .scoring import evaluate_score, unfulfilled_partner_pairs

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Optional[float]], None]


def courts_in_play(player_count: int, number_of_courts: int) -> int:
    """Courts that can actually be filled: limited by courts and by groups of four."""
    return max(0, min(number_of_courts, player_count // 4))


class ScheduleBuilder:
    """Builds complete schedules round by round; each build starts from empty history."""

    def __init__(self, players: Sequence[Player], options: MatchingOptions,
                 rng: Optional[random.Random] = None, timezone: str = "UTC"):
        self.players = list(players)
        self.players_by_id: Dict[str, Player] = {p.id: p for p in self.players}
        self.player_ids = [p.id for p in self.players]
        self.options = options
        self.rng = rng or random.Random()
        self.tz = pytz.timezone(timezone)

        self.courts = courts_in_play(len(self.players), options.number_of_courts)
        self.sitters_per_round = len(self.players) - self.courts * 4
        self.mid_skill = roster_mid_skill(self.players)

    def build(self, event_label: str = "") -> GameSchedule:
        """
        Build one full schedule.

        Raises:
            ScheduleConstructionError: A round could not be built consistently
        """
        number_of_rounds = max(0, self.options.number_of_rounds)
        rest_matrix = build_rest_schedule(
            self.player_ids,
            self.sitters_per_round,
            number_of_rounds,
            distribute_equally=self.options.distribute_rest_equally,
            first_round_sitters=self.options.first_round_sitters,
            rng=self.rng
        )

        history = RoundHistory(self.player_ids)
        rounds: List[List[Game]] = []
        for r in range(number_of_rounds):
            resting = set(rest_matrix[r])
            playing = [pid for pid in self.player_ids if pid not in resting]
            games = self.build_round(r + 1, playing, history)
            history.record_round(games)
            rounds.append(games)

        return GameSchedule(
            rounds=rounds,
            resting_players=rest_matrix,
            event_label=event_label,
            options=self.options,
            generated_at=datetime.now(self.tz)
        )

    def build_round(self, round_number: int, playing: Sequence[str],
                    history: RoundHistory) -> List[Game]:
        """Pair, match and place one round's players, checking counts at every step."""
        expected_players = self.courts * 4
        if len(playing) != expected_players:
            raise ScheduleConstructionError(
                f"Round {round_number}: expected {expected_players} players but got {len(playing)}",
                round_number
            )

        pairs = create_pairs(playing, self.players_by_id, history, self.options,
                             self.mid_skill, self.rng)
        if len(pairs) != self.courts * 2:
            raise ScheduleConstructionError(
                f"Round {round_number}: expected {self.courts * 2} pairs but got {len(pairs)}",
                round_number
            )

        matchups = match_pairs(pairs, self.players_by_id, history, self.options)
        if len(matchups) != self.courts:
            raise ScheduleConstructionError(
                f"Round {round_number}: expected {self.courts} matchings but got {len(matchups)}",
                round_number
            )

        if logger.isEnabledFor(logging.DEBUG):
            over = relaxed_matchups(matchups, self.players_by_id, self.options)
            if over:
                logger.debug("Round %d: %d matchups exceed the skill limit", round_number, len(over))

        placed = assign_courts(matchups, self.courts, history, self.rng)
        if len(placed) != self.courts:
            raise ScheduleConstructionError(
                f"Round {round_number}: placed {len(placed)} of {self.courts} matchups on courts",
                round_number
            )

        games = [self._create_game(round_number, m) for m in placed]
        games.sort(key=lambda g: g.court)
        return games

    def _create_game(self, round_number: int, matchup: Matchup) -> Game:
        ids = matchup.players
        if len(set(ids)) != 4:
            raise ScheduleConstructionError(
                f"Round {round_number}, court {matchup.court}: invalid team composition {ids}",
                round_number
            )

        skill1 = sum(lookup_player(self.players_by_id, pid).skill_level for pid in matchup.team1)
        skill2 = sum(lookup_player(self.players_by_id, pid).skill_level for pid in matchup.team2)

        return Game(
            round=round_number,
            court=matchup.court,
            team1=matchup.team1,
            team2=matchup.team2,
            team1_skill_level=skill1,
            team2_skill_level=skill2,
            skill_difference=abs(skill1 - skill2)
        )


class SchedulingEngine:
    """Runs independent construction attempts and keeps the lowest scoring schedule."""

    def __init__(self, players: Sequence[Player], options: MatchingOptions,
                 search: Optional[SearchSettings] = None,
                 weights: Optional[ScoreWeights] = None,
                 timezone: str = "UTC"):
        self.players = [p for p in players if p.active]
        self.options = options
        self.search = search or SearchSettings()
        self.weights = weights or ScoreWeights()
        self.rng = random.Random(self.search.seed)
        self.builder = ScheduleBuilder(self.players, options, self.rng, timezone)

    def attempt(self, event_label: str = "") -> Optional[GameSchedule]:
        """Build and score one schedule, or None if the attempt broke down."""
        try:
            schedule = self.builder.build(event_label)
        except ScheduleConstructionError as e:
            logger.debug("Discarding attempt: %s", e)
            return None

        schedule.score = evaluate_score(schedule, self.players, self.weights)
        return schedule

    def _search(self, event_label: str,
                cancel_event: Optional[threading.Event]) -> Iterator[Tuple[int, Optional[GameSchedule]]]:
        """Yield (attempts so far, best schedule so far) after every attempt."""
        deadline = None
        if self.search.timeout_seconds is not None:
            deadline = time.monotonic() + self.search.timeout_seconds

        best: Optional[GameSchedule] = None
        for attempt in range(1, self.search.iterations + 1):
            candidate = self.attempt(event_label)
            if candidate is not None and (best is None or candidate.score < best.score):
                best = candidate

            yield attempt, best

            if cancel_event is not None and cancel_event.is_set():
                logger.info("Search cancelled after %d attempts", attempt)
                return
            if deadline is not None and time.monotonic() >= deadline:
                logger.info("Search timed out after %d attempts", attempt)
                return

    def _finish(self, best: Optional[GameSchedule], attempts: int) -> GameSchedule:
        if best is None:
            raise ScheduleGenerationError(f"Failed to generate schedule after {attempts} attempts")
        best.attempts = attempts
        logger.info("Best schedule after %d attempts scored %.2f", attempts, best.score)
        return best

    def run(self, event_label: str = "", cancel_event: Optional[threading.Event] = None,
            progress: Optional[ProgressCallback] = None) -> GameSchedule:
        """
        Search for the best schedule.

        Args:
            event_label: Label carried on the schedule
            cancel_event: Set from another thread to stop after the current attempt
            progress: Called with (attempts, best score) every ``yield_every`` attempts

        Returns:
            GameSchedule: Lowest scoring schedule found

        Raises:
            ScheduleGenerationError: No attempt produced a schedule
        """
        attempts, best = 0, None
        for attempts, best in self._search(event_label, cancel_event):
            if progress is not None and attempts % self.search.yield_every == 0:
                progress(attempts, best.score if best is not None else None)
        return self._finish(best, attempts)

    async def run_async(self, event_label: str = "",
                        cancel_event: Optional[threading.Event] = None) -> GameSchedule:
        """Same as ``run`` but hands control back to the event loop every ``yield_every`` attempts."""
        attempts, best = 0, None
        for attempts, best in self._search(event_label, cancel_event):
            if attempts % self.search.yield_every == 0:
                await asyncio.sleep(0)
        return self._finish(best, attempts)


def generate_schedule(players: Sequence[Player], options: MatchingOptions, event_label: str = "",
                      search: Optional[SearchSettings] = None,
                      weights: Optional[ScoreWeights] = None,
                      timezone: str = "UTC",
                      cancel_event: Optional[threading.Event] = None,
                      progress: Optional[ProgressCallback] = None) -> GameSchedule:
    """
    Convenience function to run the scheduler.

    Args:
        players: Active roster (inactive players are dropped)
        options: Matching options
        event_label: Label carried on the schedule
        search: Search settings (defaults when omitted)
        weights: Score weights (defaults when omitted)
        timezone: Timezone for the generation timestamp
        cancel_event: Optional cancellation flag
        progress: Optional progress callback

    Returns:
        GameSchedule: Best schedule found
    """
    engine = SchedulingEngine(players, options, search, weights, timezone)
    return engine.run(event_label, cancel_event=cancel_event, progress=progress)


async def generate_schedule_async(players: Sequence[Player], options: MatchingOptions,
                                  event_label: str = "",
                                  search: Optional[SearchSettings] = None,
                                  weights: Optional[ScoreWeights] = None,
                                  timezone: str = "UTC",
                                  cancel_event: Optional[threading.Event] = None) -> GameSchedule:
    """Async variant of ``generate_schedule`` for interactive hosts."""
    engine = SchedulingEngine(players, options, search, weights, timezone)
    return await engine.run_async(event_label, cancel_event=cancel_event)


def validate_schedule(schedule: GameSchedule, players: Sequence[Player]) -> Dict[str, List[str]]:
    """
    Validate a completed schedule for constraint violations.

    Args:
        schedule: Schedule to validate
        players: Active roster the schedule was built from

    Returns:
        Dict[str, List[str]]: Validation results
    """
    violations = {
        'errors': [],
        'warnings': []
    }

    roster = {p.id for p in players}
    options = schedule.options
    max_court = courts_in_play(len(roster), options.number_of_courts)

    if len(schedule.resting_players) != len(schedule.rounds):
        violations['errors'].append(
            f"{len(schedule.rounds)} rounds but {len(schedule.resting_players)} resting lists"
        )

    if schedule.rounds and not schedule.games:
        violations['warnings'].append("No games scheduled")

    for r, round_games in enumerate(schedule.rounds, start=1):
        seen = set()
        courts = set()
        for game in round_games:
            if len(set(game.players)) != 4:
                violations['errors'].append(f"Round {r}, court {game.court}: malformed teams {game.players}")
            if game.round != r:
                violations['errors'].append(f"Game {game.game_id} is labelled round {game.round} in round {r}")
            if game.court in courts:
                violations['errors'].append(f"Round {r}: court {game.court} used more than once")
            courts.add(game.court)
            if game.court < 1 or game.court > max_court:
                violations['errors'].append(f"Round {r}: court {game.court} outside 1..{max_court}")
            for pid in game.players:
                if pid not in roster:
                    violations['errors'].append(f"Round {r}: unknown player {pid}")
                if pid in seen:
                    violations['errors'].append(f"Round {r}: player {pid} scheduled in more than one game")
                seen.add(pid)

        resting = set(schedule.get_resting_players_for_round(r) or [])
        if resting & seen:
            violations['errors'].append(f"Round {r}: players both resting and playing: {sorted(resting & seen)}")
        if (resting | seen) != roster:
            missing = roster - (resting | seen)
            extra = (resting | seen) - roster
            violations['errors'].append(
                f"Round {r}: roster coverage mismatch (missing {sorted(missing)}, extra {sorted(extra)})"
            )

    if options.balance_skill_levels:
        over = [g for g in schedule.games if g.skill_difference > options.max_skill_difference]
        if over:
            violations['warnings'].append(
                f"{len(over)} games exceed the max skill difference of {options.max_skill_difference:g}"
            )

    if options.respect_partner_preferences:
        for pair in unfulfilled_partner_pairs(schedule, players):
            a, b = sorted(pair)
            violations['warnings'].append(f"Preferred partners {a} and {b} never played together")

    return violations
