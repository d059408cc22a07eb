"""
Sprints router.

GET /sprints          all records of the last run, ascending id
GET /sprints/report   the console report as plain text
GET /sprints/{id}     a single record
"""
from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import PlainTextResponse

from sprintcap.schemas.common import ErrorResponse
from sprintcap.schemas.sprint import SprintRecordResponse
from sprintcap.services.report import render_report
from sprintcap.services.store import SprintRecordStore

router = APIRouter(prefix="/sprints", tags=["sprints"])


def get_store(request: Request) -> SprintRecordStore:
    return request.app.state.store


@router.get(
    "",
    response_model=list[SprintRecordResponse],
    summary="All sprint records",
    responses={500: {"model": ErrorResponse, "description": "Store not initialised or unreachable."}},
)
def list_sprints(store: SprintRecordStore = Depends(get_store)):
    return [SprintRecordResponse.model_validate(r) for r in store.read_all()]


@router.get(
    "/report",
    response_class=PlainTextResponse,
    summary="Plain-text sprint report",
)
def sprint_report(store: SprintRecordStore = Depends(get_store)):
    return render_report(store.read_all())


@router.get(
    "/{record_id}",
    response_model=SprintRecordResponse,
    summary="One sprint record",
    responses={404: {"model": ErrorResponse, "description": "No record with this id."}},
)
def get_sprint(
    record_id: int = Path(ge=1),
    store: SprintRecordStore = Depends(get_store),
):
    return SprintRecordResponse.model_validate(store.get(record_id))
