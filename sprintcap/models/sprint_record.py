"""
SprintRecord: one row per processed iteration.

Rebuilt on every run. Rows are inserted during ingestion, then updated twice
in place: once by the average pass (avg_efficiency_ratio, identical across
all rows) and once by the forecast pass (forecasted_completed).

points_completed == -1 means "no calculable completion record"; it is stored
verbatim and is NOT the same thing as 0 points completed.
"""
from sqlalchemy import Integer, Float, Text
from sqlalchemy.orm import Mapped, mapped_column

from sprintcap.db.base import Base

POINTS_NOT_FOUND = -1


class SprintRecord(Base):
    __tablename__ = "iteration_capacity"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    sprint_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    days_available: Mapped[float] = mapped_column(
        Float, nullable=False,
        comment="capacity_per_day * days_in_sprint - days_off; may be negative",
    )
    capacity_per_day: Mapped[float] = mapped_column(Float, nullable=False)
    days_off: Mapped[int] = mapped_column(Integer, nullable=False)
    points_completed: Mapped[int] = mapped_column(
        Integer, nullable=False,
        comment="-1 when no calculable completion record exists",
    )
    efficiency_ratio: Mapped[float] = mapped_column(Float, nullable=False)
    avg_efficiency_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    forecasted_completed: Mapped[int | None] = mapped_column(Integer, nullable=True)
