from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TOWN_INDEX = "town_index"


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for ingestion models."""


class Station(Base):
    """Charging station row, keyed by the upstream station id.

    `town` carries the normalized town name and is covered by `town_index`,
    which backs the town lookup endpoint. `expires_at` is advisory only:
    nothing in the sync path deletes rows because they expired.
    """

    __tablename__ = "stations"
    __table_args__ = (Index(TOWN_INDEX, "town"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    external_uid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    town: Mapped[str] = mapped_column(String(255), nullable=False)
    town_raw: Mapped[str] = mapped_column(String(255), nullable=False)

    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    postcode: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    verified_recently: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    last_verified_at: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    last_status_update_at: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    point_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    expires_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


def create_tables(engine) -> None:
    """Create the station table and its town index if they do not exist.

    Parameters
    ----------
    engine : sqlalchemy.Engine
        SQLAlchemy engine for the target database.
    """
    Base.metadata.create_all(bind=engine)
