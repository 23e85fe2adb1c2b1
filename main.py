"""CLI entry point for the career job hunt simulator."""

import argparse
import logging
import random
import sys

from careersim.core.config import Settings
from careersim.core.db import init_db, save_session
from careersim.pipeline.mirror import MirrorResult
from careersim.pipeline.orchestrator import (
    create_session,
    get_mirror,
    resolve_catalog,
    run_simulation,
)
from careersim.profile.schema import PlayerProfile
from careersim.profile.seeder import describe_stats, seed_stats
from careersim.scenarios.catalog import find_problems, load_catalog


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Career simulator - seed a player and simulate the job hunt",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- seed subcommand ---
    seed_parser = subparsers.add_parser("seed", help="Show the stats seeded from a profile")
    seed_parser.add_argument(
        "--profile",
        default="config/profile.yaml",
        help="Path to profile YAML (default: config/profile.yaml)",
    )
    seed_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- simulate subcommand ---
    simulate_parser = subparsers.add_parser("simulate", help="Run the day loop for a profile")
    simulate_parser.add_argument(
        "--profile",
        default="config/profile.yaml",
        help="Path to profile YAML (default: config/profile.yaml)",
    )
    simulate_parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    simulate_parser.add_argument(
        "--days",
        type=int,
        help="Days to simulate (default: simulation.max_days)",
    )
    simulate_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a replayable run",
    )
    simulate_parser.add_argument(
        "--scenario-every",
        type=int,
        default=7,
        help="Play a random scenario choice every N days, 0 to disable (default: 7)",
    )
    simulate_parser.add_argument(
        "--save",
        action="store_true",
        help="Persist the finished session to the configured database",
    )
    simulate_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- validate-catalog subcommand ---
    validate_parser = subparsers.add_parser(
        "validate-catalog",
        help="Check a scenario catalog for coverage gaps and duplicates",
    )
    validate_parser.add_argument(
        "--catalog",
        help="Path to catalog YAML (default: packaged catalog)",
    )
    validate_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_seed(args: argparse.Namespace) -> None:
    """Handle seed subcommand."""
    profile = PlayerProfile.from_yaml(args.profile)
    print(describe_stats(seed_stats(profile), profile))


def cmd_simulate(args: argparse.Namespace) -> None:
    """Handle simulate subcommand."""
    settings = Settings.from_yaml(args.config)
    profile = PlayerProfile.from_yaml(args.profile)
    catalog = resolve_catalog(settings)

    days = args.days if args.days is not None else settings.simulation.max_days
    rng = random.Random(args.seed)
    session = create_session(profile, settings)
    reports = run_simulation(
        session, days, rng, settings, catalog=catalog, scenario_every=args.scenario_every,
    )
    if args.verbose:
        for day, report in enumerate(reports, start=1):
            print(f"Day {day}: " + "; ".join(report.events))

    progress = session.progress
    print(f"\nSimulated {len(reports)} days for session {session.session_id}")
    print(f"  State: {progress.phase.state}")
    print(f"  Applications: {progress.total_applications}, "
          f"interviews: {progress.total_interviews}, rejections: {progress.total_rejections}")
    print(f"  Savings: ${session.stats.savings:,.0f}, stress: {session.stats.stress:.0f}/100")
    if progress.ending:
        print(f"  Ending: {progress.ending.type} on day {progress.ending.triggered_at:.0f}")
        print(f"    {progress.ending.summary}")

    print_mirror(get_mirror(session))

    if args.save:
        conn = init_db(settings.database.path)
        save_session(conn, session)
        conn.close()
        print(f"\nSession saved to {settings.database.path}")


def print_mirror(mirror: MirrorResult) -> None:
    print(f"\nCAREER MIRROR: {mirror.archetype}")
    print(f"  {mirror.archetype_description}")
    print(f"  Dominant trait: {mirror.dominant_trait}")
    for trait, score in mirror.trait_scores.items():
        print(f"    {trait}: {score}")
    if mirror.funnel_path:
        print(f"  Funnel: {' -> '.join(mirror.funnel_path)}")
    for moment in mirror.key_moments:
        print(f"  * {moment}")


def cmd_validate_catalog(args: argparse.Namespace) -> None:
    """Handle validate-catalog subcommand."""
    catalog = load_catalog(args.catalog)
    problems = find_problems(catalog)
    if problems:
        print(f"{len(problems)} problem(s) found:", file=sys.stderr)
        for problem in problems:
            print(f"  - {problem}", file=sys.stderr)
        sys.exit(1)
    print(f"Catalog OK: {len(catalog)} scenarios")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    handlers = {
        "seed": cmd_seed,
        "simulate": cmd_simulate,
        "validate-catalog": cmd_validate_catalog,
    }
    try:
        handlers[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
