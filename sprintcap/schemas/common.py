"""
Error envelope shared by every non-2xx response of the sprints API.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: str = Field(examples=["SPRINT_RECORD_NOT_FOUND", "STORE_ERROR"])
    message: str
    details: Optional[dict[str, Any]] = None
