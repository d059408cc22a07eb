"""
Sprint record schemas.

GET /sprints        → list[SprintRecordResponse]
GET /sprints/{id}   → SprintRecordResponse
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SprintRecordResponse(BaseModel):
    """One processed iteration with its derived figures."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    sprint_number: int
    days_available: float = Field(
        description="capacity_per_day * days_in_sprint - days_off. Not clamped."
    )
    capacity_per_day: float
    days_off: int
    points_completed: int = Field(
        description="-1 when no calculable completion record exists.",
        examples=[21, 0, -1],
    )
    efficiency_ratio: float
    avg_efficiency_ratio: Optional[float] = Field(
        default=None,
        description="Mean efficiency over rows with points_completed != 0. Null when none qualify.",
    )
    forecasted_completed: Optional[int] = Field(
        default=None,
        description="Only set for sprints with exactly 0 points completed and positive days available.",
    )
