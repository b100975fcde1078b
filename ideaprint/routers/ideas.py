from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from ideaprint.deps import get_owner, get_store
from ideaprint.services.codec import decode_blueprint
from ideaprint.services.repository import IdeaRepository
from ideaprint.services.session_store import SessionStore
from ideaprint.services.store import ACCESS_POLICY_CODE, IdeaStore
from ideaprint.services.tasks import board, filter_tasks

router = APIRouter()

def get_repository(store: IdeaStore = Depends(get_store)) -> IdeaRepository:
    # API callers carry no session tier of their own
    return IdeaRepository(SessionStore({}), store)

class IdeaPayload(BaseModel):
    title: str
    description: str
    blueprint: Dict[str, Any] = Field(default_factory=dict)

class TaskStatusPayload(BaseModel):
    status: str

@router.post("/ideas")
def create_idea(payload: IdeaPayload, owner: str = Depends(get_owner),
                repo: IdeaRepository = Depends(get_repository)):
    blueprint = decode_blueprint(payload.blueprint)
    outcome = repo.save_generated(payload.title, payload.description, blueprint, owner)
    if outcome.error:
        status = 403 if outcome.code == ACCESS_POLICY_CODE else 400
        return JSONResponse(status_code=status, content={"error": outcome.error})
    return {"success": True, "data": {"idea": outcome.idea.dump(), "blueprintSaved": outcome.blueprint_saved},
            "warning": outcome.warning}

@router.get("/ideas")
def list_ideas(owner: str = Depends(get_owner), repo: IdeaRepository = Depends(get_repository)):
    return {"success": True, "data": [p.dump() for p in repo.list_projects(owner)]}

@router.get("/ideas/{idea_id}")
def get_idea(idea_id: str, owner: str = Depends(get_owner), repo: IdeaRepository = Depends(get_repository)):
    idea, blueprint = repo.get_project(idea_id, owner)
    return {"success": True, "data": {"idea": idea.dump(), "blueprint": blueprint.dump() if blueprint else None}}

@router.put("/ideas/{idea_id}/blueprint")
def save_blueprint(idea_id: str, payload: Dict[str, Any], owner: str = Depends(get_owner),
                   store: IdeaStore = Depends(get_store)):
    blueprint_id = store.save_blueprint(idea_id, decode_blueprint(payload), owner)
    return {"success": True, "data": {"id": blueprint_id, "ideaId": idea_id}}

@router.delete("/ideas/{idea_id}")
def delete_idea(idea_id: str, owner: str = Depends(get_owner), repo: IdeaRepository = Depends(get_repository)):
    repo.delete_project(idea_id, owner)
    return {"success": True}

@router.get("/tasks")
def list_tasks(status: Optional[str] = None, search: str = "", project: str = "all", category: str = "all",
               priority: str = "all", owner: str = Depends(get_owner),
               repo: IdeaRepository = Depends(get_repository)):
    tasks = repo.list_tasks(owner)
    filters = dict(search=search, project=project, category=category, priority=priority)
    if status is None:
        columns = board(tasks, **filters)
        return {"success": True, "data": {k: [t.dump() for t in v] for k, v in columns.items()}}
    return {"success": True, "data": [t.dump() for t in filter_tasks(tasks, status=status, **filters)]}

@router.patch("/tasks/{task_id}")
def update_task(task_id: str, payload: TaskStatusPayload, owner: str = Depends(get_owner),
                repo: IdeaRepository = Depends(get_repository)):
    repo.update_task_status(task_id, payload.status, owner)
    return {"success": True}

@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, owner: str = Depends(get_owner), repo: IdeaRepository = Depends(get_repository)):
    repo.delete_task(task_id, owner)
    return {"success": True}

@router.get("/dashboard")
def dashboard(owner: str = Depends(get_owner), repo: IdeaRepository = Depends(get_repository)):
    return {"success": True, "data": repo.dashboard_metrics(owner)}
