from typing import Any, Iterable, Mapping

from ideaprint.schemas import Blueprint
from ideaprint.services.codec import encode_blueprint

SECTION_TARGET = 6
_SKIP = ("id", "idea_id", "created_at", "updated_at")

def _has_content(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, Mapping):
        return any(_has_content(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True

def blueprint_progress(blueprint) -> int:
    """Share of filled sections out of six, as a 0-100 percentage."""
    if blueprint is None:
        return 0
    data = encode_blueprint(blueprint) if isinstance(blueprint, Blueprint) else blueprint
    sections = sum(1 for k, v in data.items() if k not in _SKIP and _has_content(v))
    return min(100, round(sections / SECTION_TARGET * 100))

def project_status(progress: int) -> str:
    if progress >= 100:
        return "completed"
    if progress > 30:
        return "in_progress"
    return "planning"

def dashboard_metrics(progress_values: Iterable[int]) -> dict:
    values = list(progress_values)
    completed = sum(1 for p in values if p >= 90)
    return {"total": len(values), "inProgress": len(values) - completed, "completed": completed}
