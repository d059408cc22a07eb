"""
Sprint record store: the iteration_capacity table and the passes over it.

Public API
----------
SprintRecordStore(engine)
    .create_schema()            drop + create, every run starts empty
    .insert(row)         -> int  one committed row, returns its id
    .update_average()    -> Optional[float]
    .for_each_row(fn)    -> int  one transaction, rolled back on any error
    .apply_forecasts()   -> int
    .read_all()          -> list[SprintRecord]   ordered by id
    .get(record_id)      -> SprintRecord
    .ping()

Every SQLAlchemyError is re-raised as StoreError: persistence failures end
the run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import func, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sprintcap.core.errors import SprintRecordNotFoundError, StoreError
from sprintcap.db.base import make_session_factory
from sprintcap.models.sprint_record import POINTS_NOT_FOUND, SprintRecord
from sprintcap.services.metrics import forecast_completed

logger = logging.getLogger(__name__)


@dataclass
class NewSprintRecord:
    """Values computed during ingestion, before the average/forecast passes."""
    name: Optional[str]
    sprint_number: int
    days_available: float
    capacity_per_day: float
    days_off: int
    points_completed: Optional[int]  # None → stored as POINTS_NOT_FOUND
    efficiency_ratio: float


class SprintRecordStore:
    """Explicit handle over one database; scoped to a single run."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = make_session_factory(engine)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def create_schema(self) -> None:
        """Discard any previous run and create an empty table."""
        table = SprintRecord.__table__
        try:
            table.drop(self.engine, checkfirst=True)
            table.create(self.engine)
        except SQLAlchemyError as exc:
            raise StoreError("create_schema", str(exc)) from exc

    def ping(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError("ping", str(exc)) from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, row: NewSprintRecord) -> int:
        record = SprintRecord(
            name=row.name,
            sprint_number=row.sprint_number,
            days_available=row.days_available,
            capacity_per_day=row.capacity_per_day,
            days_off=row.days_off,
            points_completed=(
                POINTS_NOT_FOUND if row.points_completed is None else row.points_completed
            ),
            efficiency_ratio=row.efficiency_ratio,
        )
        with self._session_factory() as db:
            try:
                db.add(record)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StoreError("insert", str(exc)) from exc
        return record.id

    def update_average(self) -> Optional[float]:
        """
        Write the mean efficiency ratio of every row with points_completed != 0
        into all rows. Rows with the -1 marker take part; rows with a genuine 0
        do not. With no qualifying row the column stays NULL.

        Committed before returning, so later passes see the final value.
        """
        with self._session_factory() as db:
            try:
                with db.begin():
                    avg = db.scalar(
                        select(func.avg(SprintRecord.efficiency_ratio))
                        .where(SprintRecord.points_completed != 0)
                    )
                    db.execute(
                        update(SprintRecord)
                        .values(avg_efficiency_ratio=avg)
                        .execution_options(synchronize_session=False)
                    )
            except SQLAlchemyError as exc:
                raise StoreError("update_average", str(exc)) from exc
        return avg

    def for_each_row(
        self,
        fn: Callable[[SprintRecord], None],
        operation: str = "for_each_row",
    ) -> int:
        """
        Call fn on every row (ascending id) inside a single transaction.
        Changes fn makes to the rows are committed together; any exception
        rolls the whole pass back and propagates.
        """
        with self._session_factory() as db:
            try:
                with db.begin():
                    rows = db.scalars(select(SprintRecord).order_by(SprintRecord.id)).all()
                    for row in rows:
                        fn(row)
            except SQLAlchemyError as exc:
                raise StoreError(operation, str(exc)) from exc
        return len(rows)

    def apply_forecasts(self) -> int:
        """Set forecasted_completed on every row. Returns how many got a value."""
        forecasted = 0

        def _forecast(row: SprintRecord) -> None:
            nonlocal forecasted
            row.forecasted_completed = forecast_completed(
                row.days_available, row.points_completed, row.avg_efficiency_ratio
            )
            if row.forecasted_completed is not None:
                forecasted += 1
            logger.debug("id %d forecast: %s", row.id, row.forecasted_completed)

        self.for_each_row(_forecast, operation="apply_forecasts")
        return forecasted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_all(self) -> list[SprintRecord]:
        with self._session_factory() as db:
            try:
                return list(db.scalars(select(SprintRecord).order_by(SprintRecord.id)))
            except SQLAlchemyError as exc:
                raise StoreError("read_all", str(exc)) from exc

    def get(self, record_id: int) -> SprintRecord:
        with self._session_factory() as db:
            try:
                record = db.get(SprintRecord, record_id)
            except SQLAlchemyError as exc:
                raise StoreError("get", str(exc)) from exc
        if record is None:
            raise SprintRecordNotFoundError(record_id)
        return record
