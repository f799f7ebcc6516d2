#!/usr/bin/env python3
"""
Operator command line for the closing engine.

Lists the runnable process catalog, shows execution history, and runs a
closing batch.  Every command prints the gateway response body as JSON.

Usage:
    python3 scripts/run_closing.py [--config FILE] [--db-url URL] <command> [options]

Examples:
    # Catalog with the last run for December 2024
    python3 scripts/run_closing.py list --category COM --data-type P --month 12 --year 2024

    # History of one process
    python3 scripts/run_closing.py history --category COM --process 10000001 --month 12 --year 2024

    # Preview run of two processes for one company
    python3 scripts/run_closing.py execute --category COM --data-type P \\
        --month 12 --year 2024 --process 10000001 --process 10000002 \\
        --company 001 --preview

Exit status: 0 on success, 1 when the request is rejected, 2 when a batch
ran but at least one process failed.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _add_period(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--month", type=int, required=required, help="Reference month (1-12).")
    parser.add_argument("--year", type=int, required=required, help="Reference year.")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List, inspect and run health-plan closing processes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML file (default: closing_config/defaults.yaml).",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Database URL; overrides the settings file and CLOSING_DATABASE_URL.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List runnable processes.")
    list_cmd.add_argument("--category", required=True)
    list_cmd.add_argument("--data-type", required=True)
    _add_period(list_cmd, required=False)

    history_cmd = sub.add_parser("history", help="Show execution history of one process.")
    history_cmd.add_argument("--category", required=True)
    history_cmd.add_argument("--process", required=True, help="Process code.")
    _add_period(history_cmd, required=True)

    exec_cmd = sub.add_parser("execute", help="Run a closing batch.")
    exec_cmd.add_argument("--category", required=True)
    exec_cmd.add_argument("--data-type", required=True)
    _add_period(exec_cmd, required=True)
    exec_cmd.add_argument(
        "--process",
        dest="processes",
        action="append",
        default=[],
        help="Process code to run; repeat to run several, in order.",
    )
    exec_cmd.add_argument("--purge", action="store_true", help="Purge existing results first.")
    exec_cmd.add_argument("--preview", action="store_true", help="Preview run.")
    exec_cmd.add_argument("--company", default=None, help="Company code (default: all companies).")
    exec_cmd.add_argument("--carrier-code", default=None)
    exec_cmd.add_argument("--cpf", default=None, help="Beneficiary CPF; requires --company.")
    exec_cmd.add_argument("--actor", default=None, help="Operator name recorded by the procedure.")
    exec_cmd.add_argument(
        "--override",
        action="store_true",
        help="Run processes past their deadline (privileged operators only).",
    )
    return parser.parse_args(argv)


def _dispatch(gateway, args: argparse.Namespace):
    if args.command == "list":
        return gateway.list_processes(
            {
                "category": args.category,
                "dataType": args.data_type,
                "month": args.month,
                "year": args.year,
            }
        )
    if args.command == "history":
        return gateway.list_history(
            {
                "category": args.category,
                "processCode": args.process,
                "month": args.month,
                "year": args.year,
            }
        )
    return gateway.execute(
        {
            "category": args.category,
            "dataType": args.data_type,
            "month": args.month,
            "year": args.year,
            "processCodes": args.processes,
            "purge": args.purge,
            "preview": args.preview,
            "company": args.company,
            "carrierCode": args.carrier_code,
            "cpf": args.cpf,
        },
        actor=args.actor,
        override_privilege=args.override,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from closing_batch.gateway import ClosingGateway
    from closing_config import get_engine_settings
    from closing_kernel.db.engine import init_engine_from_url, session_scope
    from closing_kernel.exceptions import ConfigurationError
    from closing_kernel.logging_config import configure_logging

    try:
        settings = get_engine_settings(args.config)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"ERROR: Failed to load settings: {e}", file=sys.stderr)
        return 1

    configure_logging(level=settings.log_level)

    db = settings.database
    init_engine_from_url(
        args.db_url or db.url,
        schema=db.schema,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
    )

    with session_scope() as session:
        gateway = ClosingGateway.from_settings(session, settings)
        response = _dispatch(gateway, args)

    print(json.dumps(response.body, indent=2, ensure_ascii=False))

    if not response.ok:
        return 1
    if args.command == "execute" and response.body["failed"]:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
