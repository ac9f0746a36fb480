from datetime import datetime, timezone

from gachadraw.db.engine import get_sessionmaker, make_engine
from gachadraw.models import (
    Base,
    CatalogItem,
    DrawBehaviorRecord,
    DrawConfigurationRecord,
    DrawDetailRecord,
)
from gachadraw.workflows import publish_catalog_version, run_draw


def main() -> None:
    """Seed the development database with a sample catalog and pool."""
    engine = make_engine()

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    now = datetime.now(timezone.utc)

    with Session.begin() as session:
        items = [
            CatalogItem(id=1, tier=1, name="Bronze Badge", attribute="cool", released_at=now),
            CatalogItem(id=2, tier=1, name="Bronze Pin", attribute="cute", released_at=now),
            CatalogItem(id=3, tier=2, name="Silver Badge", attribute="pure", released_at=now),
            CatalogItem(id=4, tier=3, name="Gold Badge", attribute="happy", released_at=now),
            CatalogItem(id=5, tier=4, name="Rainbow Badge", attribute="mysterious", released_at=now),
        ]
        session.add_all(items)

        pool = DrawConfigurationRecord(
            name="Starter Pool",
            description="Default pool shipped with the development database.",
            tier_rates={1: 70, 2: 20, 3: 9, 4: 1},
            details=[
                DrawDetailRecord(item_id=1, weight=60),
                DrawDetailRecord(item_id=2, weight=40),
                DrawDetailRecord(item_id=3, weight=100),
                DrawDetailRecord(item_id=4, weight=100),
                DrawDetailRecord(item_id=5, weight=100),
            ],
            behaviors=[
                DrawBehaviorRecord(id=1, behavior_type="normal", spin_count=1),
                DrawBehaviorRecord(id=2, behavior_type="over_rarity_3_once", spin_count=10),
            ],
        )
        session.add(pool)
        session.flush()

        publish_catalog_version(session, "dev-1")

        for batch in run_draw(session, pool.id, 2, count=1, seed=42):
            print("Ten pull:", ", ".join(f"{item.name} (T{item.tier})" for item in batch))


if __name__ == "__main__":
    main()
