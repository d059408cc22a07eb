"""
Azure DevOps payloads, reduced to the fields the pipeline reads or logs.

Capacity figures must be finite: NaN or Infinity in a capacity payload fails
validation, so the iteration is skipped like any other bad response.

GET {org}/{project}/{team}/_apis/work/teamsettings/iterations       → IterationList
GET {org}/{project}/_apis/work/iterations/{id}/iterationcapacities  → CapacitySnapshot
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IterationAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    time_frame: Optional[str] = Field(default=None, alias="timeFrame")


class Iteration(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: Optional[str] = None
    path: Optional[str] = None
    attributes: Optional[IterationAttributes] = None


class IterationList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    value: list[Iteration] = Field(default_factory=list)


class TeamCapacity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    team_id: str = Field(alias="teamId")
    capacity_per_day: float = Field(default=0.0, alias="teamCapacityPerDay")
    days_off: int = Field(default=0, alias="teamTotalDaysOff")


class CapacitySnapshot(BaseModel):
    """Capacity of every team member for one iteration, summed."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    capacity_per_day_total: float = Field(default=0.0, alias="totalIterationCapacityPerDay")
    days_off_total: int = Field(default=0, alias="totalIterationDaysOff")
    teams: list[TeamCapacity] = Field(default_factory=list)
