from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from sqlmodel import Session

from scoring_node.config.runtime import RuntimeSettings
from scoring_node.errors import ScoringError
from scoring_node.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scoring-node", description="Hackathon scoring node operator CLI")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init-db", help="Apply database migrations")
    init_parser.add_argument("--reset", action="store_true", help="Drop every table first (destroys all data)")

    subparsers.add_parser("serve", help="Run the HTTP API")

    qualify_parser = subparsers.add_parser("qualify", help="Select qualifiers for a target phase")
    qualify_parser.add_argument("phase_id", type=int, help="Phase the qualified teams advance into")
    qualify_parser.add_argument("--quantity", type=int, default=None, help="Number of teams (default: QUALIFIER_QUANTITY)")

    finalists_parser = subparsers.add_parser("finalists", help="List the finalists of a final phase")
    finalists_parser.add_argument("phase_id", type=int)

    recompute_parser = subparsers.add_parser("recompute-group", help="Rebuild a group's averages and ranks")
    recompute_parser.add_argument("group_id", type=int)

    rerank_parser = subparsers.add_parser("rerank-hackathon", help="Re-rank a hackathon's final rankings")
    rerank_parser.add_argument("hackathon_id", type=int)

    return parser


def _print_rows(rows: list[Any]) -> None:
    for row in rows:
        print(json.dumps(asdict(row), default=str))


def _run_task(args: argparse.Namespace, session: Session, settings: RuntimeSettings) -> int:
    from scoring_node.db.unit_of_work import DBUnitOfWork
    from scoring_node.services.qualification import QualificationSelector
    from scoring_node.services.scoring_workflow import ScoringWorkflow

    uow = DBUnitOfWork(session)

    if args.command == "qualify":
        qualified = QualificationSelector(uow, settings=settings).select_qualifiers(args.phase_id, args.quantity)
        _print_rows(qualified)
        logger.info("phase=%d: %d qualified teams", args.phase_id, len(qualified))
        return 0

    if args.command == "finalists":
        _print_rows(QualificationSelector(uow, settings=settings).get_finalists(args.phase_id))
        return 0

    if args.command == "recompute-group":
        _print_rows(ScoringWorkflow(uow, settings=settings).recompute_group(args.group_id))
        return 0

    if args.command == "rerank-hackathon":
        _print_rows(ScoringWorkflow(uow, settings=settings).rerank_hackathon(args.hackathon_id))
        return 0

    raise ValueError(f"unknown command {args.command!r}")


def main(argv: list[str] | None = None, session_factory: Callable[[], Session] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = RuntimeSettings.from_env()
    setup_logging(settings.log_level)

    if args.command == "init-db":
        from scoring_node.db.init_db import migrate, reset_db

        if args.reset:
            reset_db()
        else:
            migrate()
        return 0

    if args.command == "serve":
        from scoring_node.workers.api_worker import serve

        serve(settings)
        return 0

    if session_factory is None:
        from scoring_node.db.session import create_session

        session_factory = create_session

    with session_factory() as session:
        try:
            return _run_task(args, session, settings)
        except ScoringError as exc:
            print(f"error: {exc.message} ({exc.code})")
            return 1


def entrypoint() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    entrypoint()
