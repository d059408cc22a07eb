"""
Plain-text sprint report: one block per row, ascending id.
"""
from __future__ import annotations

from typing import Iterable, Optional

from sprintcap.models.sprint_record import SprintRecord

NULL_MARKER = "NULL"


def _float(value: Optional[float]) -> str:
    return NULL_MARKER if value is None else f"{value:f}"


def _int(value: Optional[int]) -> str:
    return NULL_MARKER if value is None else str(value)


def render_record(record: SprintRecord) -> str:
    lines = [
        f"ID: {record.id}",
        f"Sprint: {record.sprint_number}",
        f"Name: {record.name or ''}",
        f"Days Available: {_float(record.days_available)}",
        f"Capacity Per Day: {_float(record.capacity_per_day)}",
        f"Days Off: {record.days_off}",
        f"Points Completed: {record.points_completed}",
        f"Points Completed vs Days Available: {_float(record.efficiency_ratio)}",
        f"Avg Completed vs Capacity: {_float(record.avg_efficiency_ratio)}",
        f"Forecasted: {_int(record.forecasted_completed)}",
    ]
    return "\n".join(lines)


def render_report(records: Iterable[SprintRecord]) -> str:
    blocks = [render_record(r) for r in sorted(records, key=lambda r: r.id)]
    return "\n\n".join(blocks) + ("\n" if blocks else "")
