"""
Run input schemas.

arguments.json          → RunArguments
points_completed.json   → list[CompletionRecord]

Both files keep the key names used by the team's existing files (`orgURL`,
`token`, `sprint`, `calculate`, ...). The descriptive names are accepted too.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class RunArguments(BaseModel):
    """Organisation, credentials and the sprint window for one run."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    organization_url: str = Field(
        validation_alias=AliasChoices("orgURL", "organizationURL", "organization_url"),
        description="Azure DevOps organisation URL, e.g. https://dev.azure.com/contoso",
    )
    access_token: str = Field(
        validation_alias=AliasChoices("token", "accessToken", "access_token"),
        repr=False,
    )
    project: str
    team: str
    sprint_start: int = Field(
        default=0,
        validation_alias=AliasChoices("sprintStart", "sprint_start"),
        description="Only iterations whose sprint number is >= this value are processed.",
    )
    days_in_sprint: float = Field(
        default=14.0,
        validation_alias=AliasChoices("daysInSprint", "days_in_sprint"),
    )
    timeframe: Optional[Literal["past", "current", "future"]] = Field(
        default=None,
        description="Restrict the iteration listing. None lists every iteration.",
    )

    @field_validator("organization_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


class CompletionRecord(BaseModel):
    """Manually maintained actual for one sprint."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sprint_number: int = Field(
        validation_alias=AliasChoices("sprint", "sprintNumber", "sprint_number"),
    )
    completed_points: int = Field(
        validation_alias=AliasChoices("completed", "completedPoints", "completed_points"),
    )
    calculable: bool = Field(
        default=False,
        validation_alias=AliasChoices("calculate", "calculable"),
        description="Only calculable records are used by the completion lookup.",
    )


CompletionRecordList = TypeAdapter(list[CompletionRecord])
