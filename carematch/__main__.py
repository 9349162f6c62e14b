"""Main entry point for carematch."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from carematch import __version__
from carematch.config.settings import OutputFormat, Settings
from carematch.utils.logging import configure_logging


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("value must be a positive integer")
    return number


def _min_score(value: str) -> float:
    score = float(value)
    if not (0.0 <= score <= 110.0):
        raise argparse.ArgumentTypeError("--min-score must be between 0 and 110")
    return score


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (use YYYY-MM-DD)") from e


def _print_json(payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    print(json.dumps(payload, indent=2, default=_default))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="carematch",
        description="carematch: rank caregivers for a family's childcare job",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m carematch rank scenario.yaml --limit 10
  python -m carematch score scenario.yaml 42 --json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available operating modes",
    )

    # Rank mode
    rank_parser = subparsers.add_parser(
        "rank",
        help="Rank every caregiver in a scenario file",
    )
    rank_parser.add_argument(
        "scenario",
        type=Path,
        help="Path to a YAML/JSON scenario (job, family, children, caregivers)",
    )
    rank_parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Maximum number of caregivers to print (default: settings)",
    )
    rank_parser.add_argument(
        "--min-score",
        type=_min_score,
        default=None,
        help="Drop caregivers scoring below this value",
    )
    rank_parser.add_argument(
        "--eligible-only",
        action="store_true",
        help="Hide caregivers that failed a mandatory requirement",
    )
    rank_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Score the pool on this many threads (default: settings)",
    )
    rank_parser.add_argument(
        "--today",
        type=_iso_date,
        default=None,
        help="Reference date for ages and document expiry (YYYY-MM-DD)",
    )
    rank_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    # Score mode
    score_parser = subparsers.add_parser(
        "score",
        help="Show the full breakdown for one caregiver",
    )
    score_parser.add_argument(
        "scenario",
        type=Path,
        help="Path to a YAML/JSON scenario (job, family, children, caregivers)",
    )
    score_parser.add_argument(
        "caregiver_id",
        type=int,
        help="Id of the caregiver to score",
    )
    score_parser.add_argument(
        "--today",
        type=_iso_date,
        default=None,
        help="Reference date for ages and document expiry (YYYY-MM-DD)",
    )
    score_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.debug(f"carematch v{__version__} starting in {parsed.mode} mode")

    from carematch.matching.loader import ScenarioLoader
    from carematch.matching.service import MatchScoringService

    try:
        service = MatchScoringService()
    except ValueError as e:
        logger.error(f"Invalid matching configuration: {e}")
        return 1

    try:
        scenario = ScenarioLoader().load(parsed.scenario)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load scenario: {e}")
        return 1

    as_json = parsed.json or settings.output_format == OutputFormat.JSON

    if parsed.mode == "rank":
        from carematch.matching.ranking import find_best_matches

        results = find_best_matches(
            scenario.caregivers,
            scenario.job,
            scenario.family,
            scenario.children,
            limit=parsed.limit or settings.default_limit,
            min_score=parsed.min_score,
            eligible_only=parsed.eligible_only,
            max_workers=parsed.workers or settings.max_workers,
            service=service,
            today=parsed.today,
        )

        if as_json:
            _print_json({"job_id": scenario.job.id, "results": results})
            return 0

        if not results:
            print(f"No caregivers matched job {scenario.job.id}")
            return 0

        print(f"Job {scenario.job.id}: {len(results)} caregiver(s) ranked")
        for position, result in enumerate(results, start=1):
            print(f"\n#{position}")
            print(service.format_result(result))
        return 0

    if parsed.mode == "score":
        caregiver = scenario.get_caregiver(parsed.caregiver_id)
        if caregiver is None:
            logger.error(f"Caregiver {parsed.caregiver_id} not found in scenario")
            return 1

        result = service.evaluate(
            caregiver,
            scenario.job,
            scenario.family,
            scenario.children,
            today=parsed.today,
        )

        if as_json:
            _print_json(result)
        else:
            print(service.format_result(result))
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
