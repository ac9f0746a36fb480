from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .catalog import CatalogItem, CatalogVersion  # noqa: F401
from .draw_configuration import (  # noqa: F401
    DrawBehaviorRecord,
    DrawConfigurationRecord,
    DrawDetailRecord,
)

__all__ = [
    "Base",
    "CatalogItem",
    "CatalogVersion",
    "DrawConfigurationRecord",
    "DrawDetailRecord",
    "DrawBehaviorRecord",
]
