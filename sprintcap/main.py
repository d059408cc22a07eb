from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sprintcap import __version__
from sprintcap.core.config import settings
from sprintcap.core.errors import (
    SprintCapException,
    StoreError,
    sprintcap_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from sprintcap.db.base import make_engine
from sprintcap.routers import sprints as sprints_router
from sprintcap.routers.sprints import get_store
from sprintcap.services.store import SprintRecordStore


def create_app(store: Optional[SprintRecordStore] = None) -> FastAPI:
    app = FastAPI(
        title="Sprint Capacity API",
        description=(
            "Read-only view of the last pipeline run: one record per sprint with "
            "days available, efficiency ratio, the run-wide average and the "
            "forecast.\n\n"
            "All error responses follow the `{code, message, details}` envelope."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store or SprintRecordStore(make_engine(settings.DATABASE_URL))

    # --- Exception handlers (most specific first) ---
    app.add_exception_handler(SprintCapException, sprintcap_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --- Routers ---
    app.include_router(sprints_router.router)

    @app.get("/health", tags=["health"], summary="Health check")
    def health(store: SprintRecordStore = Depends(get_store)):
        """
        Returns `{"status": "ok", "db": "ok"}` when the database is reachable,
        HTTP 503 otherwise.
        """
        try:
            store.ping()
        except StoreError:
            return JSONResponse(
                status_code=503,
                content={"status": "error", "db": "unreachable"},
            )
        return {"status": "ok", "db": "ok"}

    return app


app = create_app()
