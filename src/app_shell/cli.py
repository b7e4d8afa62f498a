import argparse
import logging
import sys
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteCrossingRepo
from src.adapters.time_local import LocalTimeAdapter
from src.api.deps import Settings
from src.app_shell.config import validate_ops_rules
from src.components.crossings import (
    CreateCrossingInput,
    CrossingService,
    DeleteCrossingInput,
    ListCrossingsInput,
    run_create,
    run_delete,
    run_list,
)
from src.components.presence import ComputePresenceInput, run_compute
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")


@dataclass
class CliContext:
    settings: Settings
    rules: Rules
    time_port: LocalTimeAdapter
    service: CrossingService


def get_context() -> CliContext:
    settings = Settings()
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    try:
        rules = load_rules(settings.rules_path)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as e:
        logger.error("Cannot load configuration: %s", e)
        sys.exit(1)

    validate_ops_rules(rules, settings.data_dir)

    try:
        SQLiteMigrator(settings.db_path).run_migrations()
    except RuntimeError as e:
        logger.error("%s", e)
        sys.exit(1)

    time_port = LocalTimeAdapter(rules.presence.timezone)
    repo = SQLiteCrossingRepo(settings.db_path)
    return CliContext(
        settings=settings,
        rules=rules,
        time_port=time_port,
        service=CrossingService(repo=repo, clock=time_port),
    )


def handle_migrate(ctx: CliContext, args: argparse.Namespace) -> None:
    # get_context already applied pending migrations
    print(f"Database ready at {ctx.settings.db_path}")


def handle_add(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_create(
        CreateCrossingInput(
            subject=args.subject,
            kind=args.kind.upper(),
            timestamp=args.timestamp,
            location=args.port,
            notes=args.notes,
        ),
        ctx.service,
    )
    if not result.success or result.crossing is None:
        for error in result.errors:
            logger.error("%s: %s", error.code, error.message)
        sys.exit(1)

    print(f"Recorded {result.crossing.kind} {result.crossing.id}")


def handle_list(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_list(ListCrossingsInput(subject=args.subject), ctx.service)
    if result.total == 0:
        print("No crossings recorded.")
        return

    for crossing in result.crossings:
        local = ctx.time_port.to_local(crossing.timestamp)
        print(f"{crossing.id}  {crossing.kind:<5}  {local:%Y-%m-%d %H:%M}  {crossing.location}")


def handle_delete(ctx: CliContext, args: argparse.Namespace) -> None:
    try:
        crossing_id = UUID(args.crossing_id)
    except ValueError:
        logger.error("Invalid crossing id: %s", args.crossing_id)
        sys.exit(1)

    result = run_delete(
        DeleteCrossingInput(subject=args.subject, crossing_id=crossing_id),
        ctx.service,
    )
    if not result.success:
        logger.error("Crossing %s not found.", args.crossing_id)
        sys.exit(1)

    print(f"Deleted {args.crossing_id}")


def handle_stats(ctx: CliContext, args: argparse.Namespace) -> None:
    crossings = run_list(ListCrossingsInput(subject=args.subject), ctx.service).crossings
    result = run_compute(
        ComputePresenceInput(events=crossings, reference_today=args.today),
        time_port=ctx.time_port,
        rules=ctx.rules.presence,
    )

    if args.trace:
        for stay in result.trace.stays:
            print(f"  {stay.start_day} -> {stay.end_day}: {stay.days} day(s)")
        if result.trace.open_entry is not None:
            since = ctx.time_port.local_date(result.trace.open_entry.timestamp)
            print(
                f"  open entry since {since}: {result.trace.open_entry_decision}"
                f" ({result.trace.open_entry_days} day(s))"
            )

    stats = result.stats
    print(f"Days in {ctx.rules.presence.country_name}: {stats.total_days}")
    print(f"Remaining: {stats.remaining_days} of {stats.target_days}")
    print(f"Complete: {stats.percent_complete:.1f}%")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Presence Tracker CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")

    add_parser = subparsers.add_parser("add", help="Record a border crossing")
    add_parser.add_argument("--subject", required=True, help="Owner email")
    add_parser.add_argument("kind", choices=["entry", "exit", "ENTRY", "EXIT"])
    add_parser.add_argument("timestamp", help="ISO-8601 timestamp, e.g. 2024-01-05T08:00:00-05:00")
    add_parser.add_argument("--port", required=True, help="Port of entry")
    add_parser.add_argument("--notes", default=None)

    list_parser = subparsers.add_parser("list", help="List recorded crossings")
    list_parser.add_argument("--subject", required=True, help="Owner email")

    delete_parser = subparsers.add_parser("delete", help="Delete a crossing")
    delete_parser.add_argument("--subject", required=True, help="Owner email")
    delete_parser.add_argument("crossing_id")

    stats_parser = subparsers.add_parser("stats", help="Show days present and progress")
    stats_parser.add_argument("--subject", required=True, help="Owner email")
    stats_parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Pin today's date (YYYY-MM-DD)",
    )
    stats_parser.add_argument("--trace", action="store_true", help="Show per-stay breakdown")

    return parser


HANDLERS = {
    "migrate": handle_migrate,
    "add": handle_add,
    "list": handle_list,
    "delete": handle_delete,
    "stats": handle_stats,
}


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    ctx = get_context()
    HANDLERS[args.command](ctx, args)


if __name__ == "__main__":
    main()
