"""
Loaders for the two JSON run inputs. Any failure here is fatal to the run.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from sprintcap.core.errors import CompletionInputError, ConfigurationError
from sprintcap.schemas.inputs import CompletionRecord, CompletionRecordList, RunArguments


def load_run_arguments(path: str | Path) -> RunArguments:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(str(path), exc.strerror or str(exc)) from exc
    try:
        return RunArguments.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(str(path), str(exc)) from exc


def load_completion_records(path: str | Path) -> list[CompletionRecord]:
    """Records keep their file order; the completion lookup depends on it."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CompletionInputError(str(path), exc.strerror or str(exc)) from exc
    try:
        return CompletionRecordList.validate_json(raw)
    except ValidationError as exc:
        raise CompletionInputError(str(path), str(exc)) from exc
