"""SQLAlchemy ORM models for the SubmarineTracker tables.

Only the columns subwatch reads are mapped. Column names follow the
plugin's schema; return times are stored as Unix seconds.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""


class FreeCompanyRecord(Base):
    """A character and the free company that owns its submarines."""

    __tablename__ = "freecompany"

    free_company_id: Mapped[int] = mapped_column(
        "FreeCompanyId", Integer, primary_key=True
    )
    tag: Mapped[str] = mapped_column("FreeCompanyTag", String, default="")
    character_name: Mapped[str] = mapped_column("CharacterName", String, default="")


class SubmarineRecord(Base):
    """One submarine and its current voyage return time."""

    __tablename__ = "submarine"

    submarine_id: Mapped[int] = mapped_column("SubmarineId", Integer, primary_key=True)
    free_company_id: Mapped[int] = mapped_column(
        "FreeCompanyId",
        Integer,
        ForeignKey("freecompany.FreeCompanyId"),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column("Name", String, default="")
    return_time: Mapped[int | None] = mapped_column("Return", Integer, nullable=True)
