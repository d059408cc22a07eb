"""
Per-sprint capacity metrics.

Pure functions, no I/O and no ORM:

find_points_completed(sprint_number, records)        -> Optional[int]
days_available(capacity_per_day, days_off, days)     -> float
efficiency_ratio(points_completed, days_available)   -> float
forecast_completed(days_available, points, avg)      -> Optional[int]

"Not found" travels as None here. Only the store turns it into the -1
column value.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from sprintcap.models.sprint_record import POINTS_NOT_FOUND
from sprintcap.schemas.inputs import CompletionRecord

# Ratio given to sprints without a calculable completion record.
PLACEHOLDER_RATIO = 0.5


def find_points_completed(
    sprint_number: int,
    records: Iterable[CompletionRecord],
) -> Optional[int]:
    """First calculable record for the sprint wins. None when there is none."""
    for record in records:
        if record.calculable and record.sprint_number == sprint_number:
            return record.completed_points
    return None


def days_available(
    capacity_per_day_total: float,
    days_off_total: int,
    days_in_sprint: float,
) -> float:
    """Team working days in the sprint. Not clamped: may be negative."""
    return capacity_per_day_total * days_in_sprint - days_off_total


def efficiency_ratio(points_completed: Optional[int], days_available: float) -> float:
    """
    Points completed per available day.

    days_available is truncated toward zero first. The checks run in order:
      1. truncated days == 0          → 0.0
      2. no completion record         → PLACEHOLDER_RATIO
      3. otherwise                    → points / truncated days
    """
    days = int(days_available)
    if days == 0:
        return 0.0
    if points_completed is None or points_completed == POINTS_NOT_FOUND:
        return PLACEHOLDER_RATIO
    return points_completed / days


def forecast_completed(
    days_available: float,
    points_completed: int,
    avg_efficiency_ratio: Optional[float],
) -> Optional[int]:
    """
    Projected points for a sprint that has none recorded yet.

    Only sprints with exactly 0 points completed (not the -1 marker) and
    positive days available are forecast. Rounds half away from zero.
    """
    if points_completed != 0 or days_available <= 0 or avg_efficiency_ratio is None:
        return None
    raw = Decimal(str(days_available * avg_efficiency_ratio))
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
