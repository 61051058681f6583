"""Database layer."""

from subwatch.db.engine import Database, OpenMode, sqlite_url
from subwatch.db.models import Base, FreeCompanyRecord, SubmarineRecord

__all__ = [
    # Engine
    "Database",
    "OpenMode",
    "sqlite_url",
    # Models
    "Base",
    "FreeCompanyRecord",
    "SubmarineRecord",
]
