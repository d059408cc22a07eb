from .sprint_record import SprintRecord, POINTS_NOT_FOUND

__all__ = [
    "SprintRecord",
    "POINTS_NOT_FOUND",
]
