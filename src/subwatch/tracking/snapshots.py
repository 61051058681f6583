"""Snapshot-file event source.

Each character is stored in its own JSON file:

    {
        "CharacterName": "Alyx Example",
        "Tag": "MOON",
        "LocalContentId": 18014398509481984,
        "Submarines": [
            {"SubmarineId": 1, "Name": "Nautilus", "Return": 1731603540}
        ]
    }

``Return`` is Unix seconds or an ISO-8601 string. Files are only re-read
when their modification time moves forward.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from subwatch.tracking.errors import DecodeError, StorageError
from subwatch.tracking.sources import sort_by_return
from subwatch.tracking.types import ArmPolicy, Character, Submarine

logger = logging.getLogger(__name__)


class SubmarineSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str | None = Field(default=None, alias="SubmarineId")
    name: str = Field(alias="Name")
    return_time: datetime = Field(alias="Return")

    @field_validator("return_time")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class CharacterSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    character_id: int | str | None = Field(default=None, alias="LocalContentId")
    character_name: str = Field(alias="CharacterName")
    tag: str = Field(default="", alias="Tag")
    submarines: list[SubmarineSnapshot] = Field(default_factory=list, alias="Submarines")

    def to_character(self, fallback_id: str) -> Character:
        character_id = self.character_id if self.character_id is not None else fallback_id
        submarines = [
            Submarine(
                id=sub_id,
                name=sub.name,
                return_time=sub.return_time,
                character_id=character_id,
                character_name=self.character_name,
                tag=self.tag,
            )
            for sub_id, sub in zip(self._submarine_ids(), self.submarines, strict=True)
        ]
        return Character(
            id=character_id,
            name=self.character_name,
            tag=self.tag,
            submarines=sort_by_return(submarines),
        )

    def _submarine_ids(self) -> list[int | str]:
        # Entries without an id are keyed by name; repeated names get "#n"
        ids: list[int | str] = []
        seen: dict[str, int] = {}
        for sub in self.submarines:
            if sub.id is not None:
                ids.append(sub.id)
                continue
            count = seen.get(sub.name, 0)
            seen[sub.name] = count + 1
            ids.append(sub.name if count == 0 else f"{sub.name}#{count}")
        return ids


def load_snapshot(path: Path) -> Character:
    """Read and decode one snapshot file.

    Raises:
        DecodeError: If the file is unreadable or not a valid snapshot.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        snapshot = CharacterSnapshot.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise DecodeError(f"Invalid snapshot {path.name}: {e}", path=path) from e
    return snapshot.to_character(fallback_id=path.stem)


class SnapshotSource:
    """Watches a directory of per-character snapshot files.

    A file is decoded only when its mtime is strictly newer than the last
    one seen. A file that fails to decode keeps its previous character.
    """

    default_policy = ArmPolicy.FUTURE_ONLY

    def __init__(self, directory: Path, pattern: str = "*.json"):
        self._directory = directory
        self._pattern = pattern
        self._mtimes: dict[Path, float] = {}
        self._characters: dict[Path, Character] = {}

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def characters(self) -> list[Character]:
        return list(self._characters.values())

    async def poll(self) -> list[Submarine]:
        if not self._directory.is_dir():
            raise StorageError(f"Snapshot directory not found: {self._directory}")

        try:
            paths = sorted(self._directory.glob(self._pattern))
        except OSError as e:
            raise StorageError(f"Failed to scan {self._directory}: {e}") from e

        seen: set[Path] = set()
        for path in paths:
            try:
                mtime = path.stat().st_mtime
            except OSError:
                continue  # Removed between glob and stat
            seen.add(path)
            last = self._mtimes.get(path)
            if last is not None and mtime <= last:
                continue
            self._mtimes[path] = mtime
            self._reload(path)

        for path in set(self._mtimes) - seen:
            self._mtimes.pop(path, None)
            if self._characters.pop(path, None) is not None:
                logger.info("snapshot_removed", extra={"file.path": str(path)})

        return sort_by_return(
            [sub for character in self._characters.values() for sub in character.submarines]
        )

    def _reload(self, path: Path) -> None:
        try:
            character = load_snapshot(path)
        except DecodeError as e:
            logger.warning(
                "snapshot_decode_failed",
                extra={"file.path": str(path), "error.message": str(e)},
            )
            return
        self._characters[path] = character
        logger.debug(
            "snapshot_loaded",
            extra={
                "file.path": str(path),
                "character.name": character.name,
                "submarine.count": len(character.submarines),
            },
        )

    async def close(self) -> None:
        self._mtimes.clear()
        self._characters.clear()
