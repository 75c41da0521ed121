from __future__ import annotations

# Re-export FastAPI integration helpers for convenient imports
from .fastapi import (
    attach_db,
    get_engine,
)
from .health_router import router as db_health_router

__all__ = [
    "attach_db",
    "get_engine",
    "db_health_router",
]
