from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy import text
from sqlmodel import SQLModel

import scoring_node.db.tables  # noqa: F401  (registers every table on SQLModel.metadata)
from scoring_node.db.session import engine

logger = logging.getLogger(__name__)


def tables_to_reset() -> list[str]:
    return [
        "final_qualifications",
        "rankings",
        "penalties_bonuses",
        "scores",
        "submissions",
        "criteria",
        "judge_assignments",
        "group_teams",
        "teams",
        "scoring_groups",
        "tracks",
        "phases",
        "hackathons",
        "alembic_version",
    ]


def _find_alembic_dir() -> Path | None:
    """Locate the Alembic migrations directory.

    Checks ``ALEMBIC_DIR`` first, then ``<repo>/alembic/`` next to the package.
    Returns ``None`` when neither holds an ``env.py`` and a ``versions/`` dir;
    callers fall back to ``SQLModel.metadata.create_all()``.
    """
    def _is_valid(p: Path) -> bool:
        return p.is_dir() and (p / "env.py").exists() and (p / "versions").is_dir()

    env_dir = os.getenv("ALEMBIC_DIR")
    if env_dir and _is_valid(Path(env_dir)):
        return Path(env_dir)

    repo_dir = Path(__file__).resolve().parent.parent.parent / "alembic"
    if _is_valid(repo_dir):
        return repo_dir

    return None


def _run_alembic_upgrade(alembic_dir: Path) -> None:
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(alembic_dir))
    # ConfigParser treats % as interpolation
    url = engine.url.render_as_string(hide_password=False).replace("%", "%%")
    alembic_cfg.set_main_option("sqlalchemy.url", url)

    command.upgrade(alembic_cfg, "head")


def migrate() -> None:
    """Bring the schema to head. Safe to run on every boot, never drops data."""
    alembic_dir = _find_alembic_dir()
    if alembic_dir is None:
        logger.info("No Alembic migrations directory found, using SQLModel create_all")
        SQLModel.metadata.create_all(engine)
        return

    logger.info("Running Alembic migrations from %s", alembic_dir)
    try:
        _run_alembic_upgrade(alembic_dir)
    except Exception as exc:
        logger.warning("Alembic migration failed (%s), falling back to create_all", exc)
        SQLModel.metadata.create_all(engine)


def reset_db() -> None:
    """Drop all tables and recreate from scratch. Destroys all data."""
    logger.warning("Dropping all tables")
    cascade = " CASCADE" if engine.dialect.name == "postgresql" else ""
    with engine.begin() as conn:
        for table in tables_to_reset():
            conn.execute(text(f"DROP TABLE IF EXISTS {table}{cascade}"))
    migrate()
