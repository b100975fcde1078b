import pytest
from ideaprint.schemas import Blueprint
from ideaprint.services.insights import (DEFAULT_PILLARS, display_pillars, star_count, strength_context,
                                         weakness_context, weakness_priority)
from ideaprint.services.progress import blueprint_progress, dashboard_metrics, project_status
from ideaprint.services.tasks import board, derive_tasks, filter_tasks, parse_task_id, task_id

def test_progress_counts_filled_sections(blueprint):
    assert blueprint_progress(None)==0
    assert blueprint_progress(blueprint)==100
    assert blueprint_progress({"validation": {"score": 7}, "features": {"core": []}, "user_flow": " "})==17
    assert blueprint_progress({"validation": {"score": 7}, "features": {"core": ["x"]},
                               "tech_stack": {"frontend": ["React"]}})==50

@pytest.mark.parametrize("progress,status", [(0, "planning"), (30, "planning"), (31, "in_progress"),
                                             (99, "in_progress"), (100, "completed")])
def test_project_status(progress, status):
    assert project_status(progress)==status

def test_dashboard_metrics():
    assert dashboard_metrics([100, 95, 89, 0])=={"total": 4, "inProgress": 2, "completed": 2}
    assert dashboard_metrics([])=={"total": 0, "inProgress": 0, "completed": 0}

def test_insight_copy_wraps():
    assert strength_context(10)==strength_context(0)
    assert weakness_context(13)==weakness_context(3)
    assert [weakness_priority(i) for i in range(6)]==["Critical", "High", "High", "Medium", "Medium", "Low"]

def test_star_count_and_default_pillars():
    assert [star_count(s) for s in (0, 3, 7, 10)]==[0, 2, 4, 5]
    assert display_pillars({})==DEFAULT_PILLARS
    assert display_pillars({"Revenue": 3})=={"Revenue": 3}

def test_task_ids():
    assert task_id("abc-task-1", 2)=="abc-task-1-task-2"
    assert parse_task_id("abc-task-1-task-2")==("abc-task-1", 2)
    for bad in ("", "abc", "abc-task-", "-task-3", "abc-task-x"):
        with pytest.raises(ValueError):
            parse_task_id(bad)

def test_board_filters(blueprint):
    tasks = derive_tasks("i1", blueprint, "Task Tracker")
    tasks += derive_tasks("i2", Blueprint.model_validate(
        {"tasks": [{"title": "Write landing copy", "category": "Marketing", "priority": "Low", "status": "Done"}]}),
        "Launch Site")
    cols = board(tasks)
    assert list(cols)==["Todo", "In Progress", "Done"]
    assert [len(v) for v in cols.values()]==[3, 0, 1]
    assert [t.title for t in filter_tasks(tasks, search="STRIPE")]==["Implement payment processing"]
    assert len(filter_tasks(tasks, project="Launch Site"))==1
    assert len(filter_tasks(tasks, category="Design"))==1
    assert len(filter_tasks(tasks, priority="High"))==2
    assert board(tasks, project="nothing")=={"Todo": [], "In Progress": [], "Done": []}
