"""
Command-line interface for the doubles scheduler.
"""

import argparse
import logging
import sys
import yaml
from pydantic import ValidationError

from .config import SearchSettings, load_config, validate_options
from .ingest import create_players_from_config, player_names
from .engine import generate_schedule, validate_schedule
from .scoring import score_breakdown
from .stats import compute_player_stats, player_stats_dataframe


def print_issues(title: str, issues) -> None:
    print(f"{title}:")
    for issue in issues:
        print(f"  - {issue}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Doubles Scheduler - court rotations for doubles play"
    )

    parser.add_argument(
        "--config",
        required=True,
        help="Path to YAML configuration file with roster and options"
    )

    parser.add_argument(
        "--event",
        help="Event label (overrides the configuration file)"
    )

    parser.add_argument(
        "--iterations",
        type=int,
        help="Number of construction attempts"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible schedules"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Stop searching after this many seconds"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only check the configuration without generating"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print per-player statistics and the score breakdown"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        # Load configuration
        print("Loading configuration...")
        config = load_config(args.config)

        # Create players
        print("Creating players...")
        players = create_players_from_config(config)
        print(f"Created {len(players)} active players")

        option_errors = validate_options(config.options, len(players))
        if option_errors:
            print_issues("WARNINGS found in options", option_errors)

        if args.validate_only:
            print("Validation complete. Exiting.")
            return

        overrides = {}
        if args.iterations is not None:
            overrides['iterations'] = args.iterations
        if args.seed is not None:
            overrides['seed'] = args.seed
        if args.timeout is not None:
            overrides['timeout_seconds'] = args.timeout
        search = SearchSettings(**{**config.search.model_dump(), **overrides})

        event_label = args.event if args.event is not None else config.event_label

        def report(attempts, best_score):
            shown = "n/a" if best_score is None else f"{best_score:.2f}"
            print(f"  {attempts}/{search.iterations} attempts, best score {shown}")

        print(f"Generating schedule ({search.iterations} attempts)...")
        schedule = generate_schedule(
            players,
            config.options,
            event_label=event_label,
            search=search,
            weights=config.weights,
            timezone=config.timezone,
            progress=report
        )
        print(f"Scheduled {len(schedule.games)} games in {len(schedule.rounds)} rounds")

        # Validate schedule
        print("\nValidating schedule...")
        violations = validate_schedule(schedule, players)

        if violations['errors']:
            print_issues("ERRORS found in schedule", violations['errors'])
        else:
            print("No errors found in schedule!")

        if violations['warnings']:
            print_issues("WARNINGS found in schedule", violations['warnings'])

        names = player_names(players)
        df = schedule.to_dataframe(names)

        print("\n" + "="*50)
        print(f"SCHEDULE {event_label}".rstrip())
        print("="*50)

        for round_number in range(1, len(schedule.rounds) + 1):
            print(f"\nRound {round_number}")
            if not df.empty:
                round_df = df[df['Round'] == round_number]
                for _, row in round_df.iterrows():
                    print(f"  Court {row['Court']}: {row['Team 1']} vs {row['Team 2']} "
                          f"({row['Team 1 Skill']:g} vs {row['Team 2 Skill']:g})")
            resting = schedule.get_resting_players_for_round(round_number) or []
            if resting:
                print(f"  Resting: {', '.join(names.get(pid, pid) for pid in resting)}")

        summary = schedule.get_summary_stats()
        print(f"\nTotal games scheduled: {summary['total_games']}")
        print(f"Average skill difference: {summary['average_skill_difference']}")
        print(f"Score: {summary['score']:.2f} after {schedule.attempts} attempts")

        if args.stats:
            print("\nPlayer statistics:")
            stats_df = player_stats_dataframe(compute_player_stats(schedule, players), names)
            print(stats_df.to_string(index=False))

            print("\nScore breakdown:")
            for term, values in score_breakdown(schedule, players, config.weights).items():
                print(f"  {term}: raw {values['raw']:.2f}, weighted {values['weighted']:.2f}")

        if violations['errors']:
            sys.exit(1)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid YAML configuration: {e}")
        sys.exit(1)
    except ValidationError as e:
        print(f"ERROR: Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"ERROR: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
