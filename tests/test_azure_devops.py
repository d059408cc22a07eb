"""
Tests for the Azure DevOps client against httpx.MockTransport.
"""
import base64

import httpx
import pytest

from sprintcap.core.errors import CapacityFetchError, IterationSourceError
from sprintcap.integrations.azure_devops import AzureDevOpsClient

ORG = "https://dev.azure.com/contoso/"

_ITERATIONS = {
    "count": 2,
    "value": [
        {
            "id": "a1",
            "name": "Sprint 1",
            "path": "Proj\\Sprint 1",
            "attributes": {"startDate": "2024-01-01T00:00:00Z", "timeFrame": "past"},
        },
        {"id": "a2"},
    ],
}

_CAPACITY = {
    "teams": [
        {"teamId": "t1", "teamCapacityPerDay": 3.0, "teamTotalDaysOff": 1},
        {"teamId": "t2", "teamCapacityPerDay": 2.0, "teamTotalDaysOff": 1},
    ],
    "totalIterationCapacityPerDay": 5.0,
    "totalIterationDaysOff": 2,
}


def _client(handler) -> AzureDevOpsClient:
    return AzureDevOpsClient(ORG, "pat-123", transport=httpx.MockTransport(handler))


class TestListIterations:
    def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=_ITERATIONS)

        with _client(handler) as client:
            client.list_iterations("Proj", "TeamA")

        assert seen["path"] == "/contoso/Proj/TeamA/_apis/work/teamsettings/iterations"
        assert seen["params"] == {"api-version": "7.0"}
        expected = base64.b64encode(b":pat-123").decode()
        assert seen["auth"] == f"Basic {expected}"

    def test_parses_iterations(self):
        with _client(lambda r: httpx.Response(200, json=_ITERATIONS)) as client:
            iterations = client.list_iterations("Proj", "TeamA")

        assert [i.id for i in iterations] == ["a1", "a2"]
        assert iterations[0].name == "Sprint 1"
        assert iterations[0].attributes.time_frame == "past"
        assert iterations[1].name is None

    def test_timeframe_param(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"count": 0, "value": []})

        with _client(handler) as client:
            assert client.list_iterations("Proj", "TeamA", timeframe="current") == []
        assert seen["params"]["$timeframe"] == "current"

    def test_error_status(self):
        with _client(lambda r: httpx.Response(401, text="denied")) as client:
            with pytest.raises(IterationSourceError) as exc:
                client.list_iterations("Proj", "TeamA")
        assert exc.value.details["status_code"] == 401
        assert "denied" in exc.value.message
        assert exc.value.fatal is True

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with _client(handler) as client:
            with pytest.raises(IterationSourceError):
                client.list_iterations("Proj", "TeamA")

    def test_invalid_body(self):
        with _client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(IterationSourceError):
                client.list_iterations("Proj", "TeamA")


class TestGetIterationCapacity:
    def test_request_path(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json=_CAPACITY)

        with _client(handler) as client:
            client.get_iteration_capacity("Proj", "a1")
        assert seen["path"] == "/contoso/Proj/_apis/work/iterations/a1/iterationcapacities"

    def test_parses_totals(self):
        with _client(lambda r: httpx.Response(200, json=_CAPACITY)) as client:
            snapshot = client.get_iteration_capacity("Proj", "a1")

        assert snapshot.capacity_per_day_total == 5.0
        assert snapshot.days_off_total == 2
        assert [t.team_id for t in snapshot.teams] == ["t1", "t2"]

    def test_error_status_is_not_fatal(self):
        with _client(lambda r: httpx.Response(404, text="no such iteration")) as client:
            with pytest.raises(CapacityFetchError) as exc:
                client.get_iteration_capacity("Proj", "a1")
        assert exc.value.status_code == 404
        assert exc.value.details["iteration_id"] == "a1"
        assert exc.value.fatal is False

    def test_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out")

        with _client(handler) as client:
            with pytest.raises(CapacityFetchError):
                client.get_iteration_capacity("Proj", "a1")

    def test_invalid_body(self):
        with _client(lambda r: httpx.Response(200, text="not json")) as client:
            with pytest.raises(CapacityFetchError):
                client.get_iteration_capacity("Proj", "a1")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_capacity_rejected(self, value):
        body = f'{{"totalIterationCapacityPerDay": {value}, "totalIterationDaysOff": 0}}'
        with _client(lambda r: httpx.Response(200, text=body)) as client:
            with pytest.raises(CapacityFetchError) as exc:
                client.get_iteration_capacity("Proj", "a1")
        assert exc.value.fatal is False

    def test_non_finite_team_capacity_rejected(self):
        body = (
            '{"teams": [{"teamId": "t1", "teamCapacityPerDay": NaN}],'
            ' "totalIterationCapacityPerDay": 1.0, "totalIterationDaysOff": 0}'
        )
        with _client(lambda r: httpx.Response(200, text=body)) as client:
            with pytest.raises(CapacityFetchError):
                client.get_iteration_capacity("Proj", "a1")
