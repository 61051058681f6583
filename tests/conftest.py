"""Shared test fixtures and factories."""

import json
import os
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from subwatch.db.models import Base, FreeCompanyRecord, SubmarineRecord
from subwatch.tracking.types import Submarine

# Fixed reference instant used across tests
T0 = datetime(2024, 11, 14, 16, 59, tzinfo=UTC)


# =============================================================================
# Factories
# =============================================================================


def make_sub(
    name: str,
    return_time: datetime,
    *,
    sub_id: int | str | None = None,
    character_id: int | str = 1,
    character_name: str = "Alyx Example",
    tag: str = "MOON",
) -> Submarine:
    return Submarine(
        id=sub_id if sub_id is not None else name,
        name=name,
        return_time=return_time,
        character_id=character_id,
        character_name=character_name,
        tag=tag,
    )


def after(ms: int, base: datetime = T0) -> datetime:
    return base + timedelta(milliseconds=ms)


def write_tracker_db(
    path: Path,
    companies: Iterable[tuple[int, str, str]],
    submarines: Iterable[tuple[int, int, str, int | None]],
) -> Path:
    """Create a SubmarineTracker-shaped database.

    Args:
        companies: (FreeCompanyId, FreeCompanyTag, CharacterName) rows.
        submarines: (SubmarineId, FreeCompanyId, Name, Return) rows.
    """
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        for fc_id, tag, character_name in companies:
            session.add(
                FreeCompanyRecord(
                    free_company_id=fc_id, tag=tag, character_name=character_name
                )
            )
        for sub_id, fc_id, name, return_ts in submarines:
            session.add(
                SubmarineRecord(
                    submarine_id=sub_id,
                    free_company_id=fc_id,
                    name=name,
                    return_time=return_ts,
                )
            )
        session.commit()
    engine.dispose()
    return path


def write_snapshot(
    directory: Path,
    filename: str,
    data: dict[str, Any] | str,
    mtime: float | None = None,
) -> Path:
    """Write a snapshot file, optionally forcing its modification time."""
    path = directory / filename
    text = data if isinstance(data, str) else json.dumps(data)
    path.write_text(text, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def snapshot_data(
    character_name: str,
    tag: str,
    submarines: list[tuple[str, datetime]],
    content_id: int | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "CharacterName": character_name,
        "Tag": tag,
        "Submarines": [
            {"Name": name, "Return": int(when.timestamp())} for name, when in submarines
        ],
    }
    if content_id is not None:
        data["LocalContentId"] = content_id
    return data


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def tracker_db_path(tmp_path: Path) -> Path:
    """Tracker database with two characters and four submarines."""
    return write_tracker_db(
        tmp_path / "submarine-sqlite.db",
        companies=[(10, "MOON", "Alyx Example"), (20, "SUN", "Bram Sample")],
        submarines=[
            (1, 10, "Nautilus", int(after(200_000).timestamp())),
            (2, 10, "Whale", int(T0.timestamp())),
            (1, 20, "Kraken", int(after(100_000).timestamp())),
            (3, 20, "Mola", None),
        ],
    )


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "snapshots"
    directory.mkdir()
    return directory


@pytest.fixture
def config_file(tmp_path: Path, tracker_db_path: Path) -> Path:
    """Config pointing at the temporary tracker database."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
timezone = "UTC"

[source]
kind = "sqlite"
database_path = "{tracker_db_path.as_posix()}"
"""
    )
    return config_path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config discovery and logs inside the test directory."""
    from subwatch.config.paths import get_subwatch_home

    home = tmp_path / "subwatch-home"
    monkeypatch.setenv("SUBWATCH_HOME", str(home))
    monkeypatch.delenv("SUBWATCH_BRIDGE_TOKEN", raising=False)
    monkeypatch.delenv("SUBWATCH_LOG_LEVEL", raising=False)
    monkeypatch.setenv("TZ", "UTC")
    monkeypatch.chdir(tmp_path)
    get_subwatch_home.cache_clear()
    yield home
    get_subwatch_home.cache_clear()


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() calls made by CLI tests."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
