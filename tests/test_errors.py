"""
Tests for the exception classes: codes, fatal flags and the error envelope.
"""
from sprintcap.core.errors import (
    CapacityFetchError,
    CompletionInputError,
    ConfigurationError,
    IterationSourceError,
    MissingSprintNameError,
    SprintNumberNotFoundError,
    SprintRecordNotFoundError,
    StoreError,
)


class TestFatalErrors:
    def test_configuration_error(self):
        err = ConfigurationError("arguments.json", "No such file or directory")
        assert err.fatal is True
        assert err.code == "CONFIGURATION_ERROR"
        assert "arguments.json" in err.message
        assert err.details["path"] == "arguments.json"

    def test_completion_input_error(self):
        err = CompletionInputError("points_completed.json", "bad json")
        assert err.fatal is True
        assert err.code == "COMPLETION_INPUT_ERROR"

    def test_iteration_source_error(self):
        err = IterationSourceError("boom", status_code=503)
        assert err.fatal is True
        assert err.http_status == 502
        assert err.to_dict()["details"]["status_code"] == 503

    def test_store_error(self):
        err = StoreError("insert", "no such table")
        assert err.fatal is True
        assert "insert" in err.message


class TestPerIterationErrors:
    def test_sprint_number_errors_not_fatal(self):
        assert MissingSprintNameError().fatal is False
        assert SprintNumberNotFoundError("Retro").fatal is False

    def test_capacity_fetch_error(self):
        err = CapacityFetchError("it-1", "timed out")
        assert err.fatal is False
        assert err.status_code is None
        assert "status_code" not in err.details


class TestEnvelope:
    def test_not_found(self):
        err = SprintRecordNotFoundError(7)
        assert err.http_status == 404
        d = err.to_dict()
        assert d["code"] == "SPRINT_RECORD_NOT_FOUND"
        assert d["details"]["id"] == 7

    def test_to_dict_without_details(self):
        d = MissingSprintNameError().to_dict()
        assert set(d) == {"code", "message"}
