"""
Sprint number extraction from free-text iteration names.

"Team A Sprint 67"  → 67
"Sprint   7 (hardening)" → 7
"Retro"             → SprintNumberNotFoundError
"""
from __future__ import annotations

import re
from typing import Optional

from sprintcap.core.errors import (
    MalformedSprintNumberError,
    MissingSprintNameError,
    SprintNumberNotFoundError,
)

SPRINT_PATTERN = re.compile(r"Sprint\s+(\d+)")


def extract_sprint_number(name: Optional[str]) -> int:
    """
    Return the integer following the first case-sensitive `Sprint <digits>`.
    Raises a SprintNumberError subclass when the name is missing, does not
    match, or the digit run does not parse.
    """
    if name is None:
        raise MissingSprintNameError()

    match = SPRINT_PATTERN.search(name)
    if match is None:
        raise SprintNumberNotFoundError(name)

    digits = match.group(1)
    try:
        return int(digits)
    except ValueError:
        raise MalformedSprintNumberError(name, digits) from None
