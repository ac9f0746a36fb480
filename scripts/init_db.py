from __future__ import annotations

import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from gachadraw.db.engine import get_sessionmaker, make_engine
from gachadraw.models import CatalogItem, CatalogVersion, DrawConfigurationRecord

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def migrate(target_revision: str = "head") -> None:
    """Upgrade the configured database to ``target_revision``."""
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(cfg, target_revision)


def report_catalog() -> None:
    """Print the published catalog version and row counts."""
    Session = get_sessionmaker(make_engine())
    with Session() as session:
        current = CatalogVersion.current(session)
        items = session.scalar(select(func.count()).select_from(CatalogItem))
        pools = session.scalar(select(func.count()).select_from(DrawConfigurationRecord))
    version = current.data_version if current is not None else "<unpublished>"
    print(f"Catalog version: {version}; items: {items}; draw configurations: {pools}")


def main(argv: list[str]) -> None:
    """Apply migrations (``head`` unless a revision is given) and report the catalog."""
    migrate(argv[0] if argv else "head")
    report_catalog()


if __name__ == "__main__":
    main(sys.argv[1:])
