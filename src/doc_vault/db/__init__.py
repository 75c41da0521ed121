# Public DB API exports
from .base import Base
from .engine import DBEngine
from .health import db_healthcheck
from .repository import Repository
from .settings import DBSettings, get_db_settings
from .testing import create_all, drop_all, ephemeral_db, make_sqlite_engine
from .uow import UnitOfWork

__all__ = [
    "DBSettings",
    "get_db_settings",
    "DBEngine",
    "Base",
    "Repository",
    "UnitOfWork",
    "db_healthcheck",
    "create_all",
    "drop_all",
    "ephemeral_db",
    "make_sqlite_engine",
]
