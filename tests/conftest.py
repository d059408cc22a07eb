"""
Shared pytest fixtures.

Uses an in-memory SQLite database and a fake iteration source, so neither a
database server nor Azure DevOps is required for tests.
"""
from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from sprintcap.core.errors import CapacityFetchError
from sprintcap.main import create_app
from sprintcap.schemas.azure import CapacitySnapshot, Iteration
from sprintcap.schemas.inputs import CompletionRecord, RunArguments
from sprintcap.services.store import SprintRecordStore


class FakeIterationSource:
    """Stands in for AzureDevOpsClient. Iterations are (id, name) pairs."""

    def __init__(
        self,
        iterations: list[tuple[str, Optional[str]]],
        capacities: dict[str, CapacitySnapshot],
        failing: tuple[str, ...] = (),
        list_error: Optional[Exception] = None,
    ):
        self.iterations = [Iteration(id=i, name=n) for i, n in iterations]
        self.capacities = capacities
        self.failing = set(failing)
        self.list_error = list_error
        self.capacity_calls: list[str] = []
        self.timeframes: list[Optional[str]] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return None

    def list_iterations(self, project, team, timeframe=None):
        self.timeframes.append(timeframe)
        if self.list_error is not None:
            raise self.list_error
        return list(self.iterations)

    def get_iteration_capacity(self, project, iteration_id):
        self.capacity_calls.append(iteration_id)
        if iteration_id in self.failing:
            raise CapacityFetchError(
                iteration_id, "unexpected status code 500: boom", status_code=500
            )
        return self.capacities[iteration_id]


def capacity(per_day: float, days_off: int) -> CapacitySnapshot:
    return CapacitySnapshot(capacity_per_day_total=per_day, days_off_total=days_off)


def completion(sprint: int, completed: int, calculable: bool = True) -> CompletionRecord:
    return CompletionRecord(
        sprint_number=sprint, completed_points=completed, calculable=calculable
    )


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture()
def store(engine):
    s = SprintRecordStore(engine)
    s.create_schema()
    return s


@pytest.fixture()
def run_arguments():
    return RunArguments(
        organization_url="https://dev.azure.com/contoso",
        access_token="pat-123",
        project="Proj",
        team="TeamA",
        sprint_start=0,
        days_in_sprint=14.0,
    )


@pytest.fixture()
def client(store):
    app = create_app(store=store)
    with TestClient(app) as c:
        yield c
