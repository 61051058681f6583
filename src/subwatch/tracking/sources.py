"""Event sources: where submarine return times come from.

Every source returns the full current set of submarines on each poll,
sorted ascending by return time.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from subwatch.db import Database, FreeCompanyRecord, SubmarineRecord
from subwatch.tracking.errors import StorageError
from subwatch.tracking.types import ArmPolicy, Submarine

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Source of submarine return times."""

    default_policy: ArmPolicy

    async def poll(self) -> list[Submarine]: ...

    async def close(self) -> None: ...


def sort_by_return(submarines: list[Submarine]) -> list[Submarine]:
    return sorted(submarines, key=lambda s: s.return_time)


class SqliteSource:
    """Reads submarines from the SubmarineTracker SQLite database.

    The join is re-run on every poll; nothing is cached.
    """

    default_policy = ArmPolicy.FIRE_LATE

    def __init__(self, database: Database):
        self._db = database

    @property
    def database(self) -> Database:
        return self._db

    async def poll(self) -> list[Submarine]:
        stmt = (
            select(
                SubmarineRecord.submarine_id,
                SubmarineRecord.name,
                SubmarineRecord.return_time,
                FreeCompanyRecord.free_company_id,
                FreeCompanyRecord.tag,
                FreeCompanyRecord.character_name,
            )
            .join(
                FreeCompanyRecord,
                SubmarineRecord.free_company_id == FreeCompanyRecord.free_company_id,
            )
            .order_by(SubmarineRecord.return_time.asc())
        )
        try:
            async with self._db.session() as session:
                rows = (await session.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                f"Failed to read submarines from {self._db.path}: {e}"
            ) from e

        submarines: list[Submarine] = []
        for sub_id, name, return_ts, fc_id, tag, character_name in rows:
            if return_ts is None:
                logger.debug(
                    "submarine_without_return_time", extra={"submarine.name": name}
                )
                continue
            submarines.append(
                Submarine(
                    id=sub_id,
                    name=name or "",
                    return_time=datetime.fromtimestamp(return_ts, UTC),
                    character_id=fc_id,
                    character_name=character_name or "",
                    tag=tag or "",
                )
            )
        return submarines

    async def update_return_times(self, when: datetime) -> int:
        """Set every submarine's return time to ``when``.

        Requires a database opened in a write mode.

        Returns:
            Number of submarines updated.
        """
        if self._db.mode == "ro":
            raise StorageError("Database is open read-only")
        timestamp = int(when.timestamp())
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    update(SubmarineRecord).values(return_time=timestamp)
                )
                count = result.rowcount
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to update return times: {e}") from e
        logger.info(
            "return_times_updated",
            extra={"submarine.count": count, "submarine.return_time": when.isoformat()},
        )
        return count

    async def close(self) -> None:
        await self._db.disconnect()
