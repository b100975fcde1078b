from typing import Dict, Iterable, List, Optional, Tuple

from ideaprint.schemas import Blueprint, TaskItem, TASK_STATUSES

SEPARATOR = "-task-"

def task_id(idea_id: str, index: int) -> str:
    return f"{idea_id}{SEPARATOR}{index}"

def parse_task_id(value: str) -> Tuple[str, int]:
    idea_id, sep, index = (value or "").rpartition(SEPARATOR)
    if not sep or not idea_id or not index.isdigit():
        raise ValueError(f"malformed task id: {value!r}")
    return idea_id, int(index)

def derive_tasks(idea_id: str, blueprint: Optional[Blueprint], project: str = "") -> List[TaskItem]:
    if blueprint is None:
        return []
    return [
        TaskItem(id=task_id(idea_id, i), idea_id=idea_id, index=i, project=project,
                 **t.model_dump())
        for i, t in enumerate(blueprint.tasks)
    ]

def filter_tasks(tasks: Iterable[TaskItem], status: Optional[str] = None, search: str = "",
                 project: str = "all", category: str = "all", priority: str = "all") -> List[TaskItem]:
    needle = (search or "").lower()
    out = []
    for t in tasks:
        if status is not None and t.status != status:
            continue
        if needle and needle not in t.title.lower() and needle not in t.description.lower():
            continue
        if project != "all" and t.project != project:
            continue
        if category != "all" and t.category != category:
            continue
        if priority != "all" and t.priority != priority:
            continue
        out.append(t)
    return out

def board(tasks: Iterable[TaskItem], **filters) -> Dict[str, List[TaskItem]]:
    """Tasks split into the Todo / In Progress / Done columns."""
    tasks = list(tasks)
    return {status: filter_tasks(tasks, status=status, **filters) for status in TASK_STATUSES}
