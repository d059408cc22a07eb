"""
Sprint capacity pipeline.

Public API
----------
run_pipeline(arguments, completions, source, store) → PipelineResult

Phases, strictly in order:
  1. rebuild the store (every run starts from an empty table)
  2. list iterations                         (failure is fatal)
  3. per iteration: sprint number → capacity → metrics → insert
     (name or capacity failures skip the iteration, insert failures are fatal)
  4. average pass   (committed before phase 5 starts)
  5. forecast pass  (one transaction)
  6. read every row back for the report

`source` is anything with the two AzureDevOpsClient read methods:
    list_iterations(project, team, timeframe) -> list[Iteration]
    get_iteration_capacity(project, iteration_id) -> CapacitySnapshot
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sprintcap.core.errors import CapacityFetchError, SprintNumberError
from sprintcap.models.sprint_record import SprintRecord
from sprintcap.schemas.azure import CapacitySnapshot, Iteration
from sprintcap.schemas.inputs import CompletionRecord, RunArguments
from sprintcap.services.metrics import (
    days_available,
    efficiency_ratio,
    find_points_completed,
)
from sprintcap.services.sprint_number import extract_sprint_number
from sprintcap.services.store import NewSprintRecord, SprintRecordStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class CapacityFetch:
    """Outcome of one capacity call: exactly one of snapshot / error is set."""
    iteration: Iteration
    snapshot: Optional[CapacitySnapshot] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SkippedIteration:
    name: Optional[str]
    reason: str
    code: str


@dataclass
class PipelineResult:
    records: list[SprintRecord] = field(default_factory=list)
    avg_efficiency_ratio: Optional[float] = None
    forecasted: int = 0
    skipped: list[SkippedIteration] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fetch_capacity(source, project: str, iteration: Iteration) -> CapacityFetch:
    try:
        snapshot = source.get_iteration_capacity(project, iteration.id)
    except CapacityFetchError as exc:
        return CapacityFetch(iteration=iteration, error=exc.message)
    return CapacityFetch(iteration=iteration, snapshot=snapshot)


def build_record(
    name: Optional[str],
    sprint_number: int,
    snapshot: CapacitySnapshot,
    completions: list[CompletionRecord],
    days_in_sprint: float,
) -> NewSprintRecord:
    """Derive the insert-time figures for one sprint."""
    days = days_available(
        snapshot.capacity_per_day_total, snapshot.days_off_total, days_in_sprint
    )
    points = find_points_completed(sprint_number, completions)
    return NewSprintRecord(
        name=name,
        sprint_number=sprint_number,
        days_available=days,
        capacity_per_day=snapshot.capacity_per_day_total,
        days_off=snapshot.days_off_total,
        points_completed=points,
        efficiency_ratio=efficiency_ratio(points, days),
    )


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def run_pipeline(
    arguments: RunArguments,
    completions: list[CompletionRecord],
    source,
    store: SprintRecordStore,
) -> PipelineResult:
    result = PipelineResult()

    store.create_schema()

    iterations = source.list_iterations(
        arguments.project, arguments.team, arguments.timeframe
    )

    for iteration in iterations:
        try:
            sprint_number = extract_sprint_number(iteration.name)
        except SprintNumberError as exc:
            logger.warning(
                "Error extracting sprint number from iteration name %r: %s",
                iteration.name, exc.message,
            )
            result.skipped.append(SkippedIteration(iteration.name, exc.message, exc.code))
            continue

        if sprint_number < arguments.sprint_start:
            continue

        logger.info("Working on sprint: %d", sprint_number)
        logger.debug(
            "Iteration %s path=%r timeframe=%s",
            iteration.id,
            iteration.path,
            iteration.attributes.time_frame if iteration.attributes else None,
        )

        fetch = _fetch_capacity(source, arguments.project, iteration)
        if not fetch.ok:
            logger.warning(
                "Error fetching capacities for iteration %r: %s", iteration.name, fetch.error
            )
            result.skipped.append(
                SkippedIteration(iteration.name, fetch.error, CapacityFetchError.code)
            )
            continue

        for team in fetch.snapshot.teams:
            logger.debug(
                "Sprint %d team %s: %.2f per day, %d days off",
                sprint_number, team.team_id, team.capacity_per_day, team.days_off,
            )

        row = build_record(
            iteration.name,
            sprint_number,
            fetch.snapshot,
            completions,
            arguments.days_in_sprint,
        )
        store.insert(row)

    logger.info("Determine the average of completed vs capacity")
    result.avg_efficiency_ratio = store.update_average()

    logger.info("Determine the forecasted completed")
    result.forecasted = store.apply_forecasts()

    result.records = store.read_all()
    logger.info(
        "Processed %d sprints, skipped %d, forecasted %d",
        len(result.records), len(result.skipped), result.forecasted,
    )
    return result
