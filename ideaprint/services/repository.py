"""Two-tier repository: the per-tab session tier in front of the store.

Every view reads through ``IdeaRepository``; the only merge rule lives in
``merge_by_id``.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from ideaprint.schemas import Blueprint, BlueprintTask, Idea, Project, TaskItem, TASK_STATUSES
from ideaprint.services.progress import blueprint_progress, dashboard_metrics, project_status
from ideaprint.services.session_store import SessionStore
from ideaprint.services.store import AccessPolicyError, IdeaStore, NotFoundError, StoreError
from ideaprint.services.tasks import derive_tasks, parse_task_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _item_id(item) -> Optional[str]:
    if isinstance(item, dict):
        return item.get("id")
    return getattr(item, "id", None)


def merge_by_id(session_items: Iterable[T], server_items: Iterable[T],
                key: Callable[[T], Optional[str]] = _item_id) -> List[T]:
    """Session items first, then server items whose id has not been seen."""
    seen = set()
    merged: List[T] = []
    for item in list(session_items) + list(server_items):
        item_id = key(item)
        if item_id in seen:
            continue
        seen.add(item_id)
        merged.append(item)
    return merged


@dataclass
class SaveOutcome:
    idea: Optional[Idea]
    persisted: bool = False
    blueprint_saved: bool = False
    warning: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None


def _project(idea: Idea, blueprint: Optional[Blueprint], saved: bool = True) -> Project:
    progress = blueprint_progress(blueprint)
    return Project(id=idea.id, title=idea.title, description=idea.description,
                   validation_score=idea.validation_score, created_at=idea.created_at,
                   progress=progress, status=project_status(progress), saved=saved)


class IdeaRepository:
    def __init__(self, session: SessionStore, store: Optional[IdeaStore] = None):
        self.session = session
        self.store = store

    def _remote(self, owner_id: Optional[str]) -> bool:
        return bool(owner_id) and self.store is not None

    # writes

    def _persist(self, idea: Idea, blueprint: Blueprint, owner_id: str) -> SaveOutcome:
        try:
            persisted = self.store.create_idea(idea.title, idea.description, owner_id,
                                               blueprint.validation.score)
        except AccessPolicyError as e:
            logger.error("idea insert refused by access policy: %s", e.details)
            return SaveOutcome(idea=idea, error=e.message, code=e.code)
        except (StoreError, ValueError) as e:
            logger.error("idea insert failed: %s", e)
            return SaveOutcome(idea=idea, error=f"Error saving project: {e}")

        outcome = SaveOutcome(idea=persisted, persisted=True)
        try:
            self.store.save_blueprint(persisted.id, blueprint, owner_id)
            outcome.blueprint_saved = True
        except StoreError as e:
            # the idea row stays; the blueprint can be saved again from the project view
            logger.error("blueprint insert for idea %s failed: %s", persisted.id, e)
            outcome.warning = f"Idea saved, but its blueprint could not be saved: {e.message}"
        self.session.put(persisted, blueprint, saved=outcome.blueprint_saved)
        return outcome

    def save_generated(self, title: str, description: str, blueprint: Blueprint,
                       owner_id: Optional[str] = None) -> SaveOutcome:
        idea = Idea(title=title, description=description, validation_score=blueprint.validation.score,
                    owner_id=owner_id)
        self.session.put(idea, blueprint, saved=False)
        if not self._remote(owner_id):
            return SaveOutcome(idea=idea)
        return self._persist(idea, blueprint, owner_id)

    def mark_saved(self, idea_id: str, owner_id: Optional[str] = None) -> SaveOutcome:
        if self.session.holds(idea_id):
            idea, blueprint = self.session.idea(), self.session.blueprint()
            if not self._remote(owner_id) or blueprint is None:
                self.session.mark_saved(True)
                return SaveOutcome(idea=idea)
            try:
                self.store.get_idea(idea_id, owner_id)
            except NotFoundError:
                return self._persist(idea, blueprint, owner_id)
            except StoreError as e:
                logger.error("looking up %s before save failed: %s", idea_id, e)
                return SaveOutcome(idea=idea, error=e.message, code=e.code)
        else:
            try:
                idea, blueprint = self.get_project(idea_id, owner_id)
            except StoreError as e:
                logger.error("loading %s for save failed: %s", idea_id, e)
                return SaveOutcome(idea=None, error=e.message, code=e.code)
            if blueprint is None:
                return SaveOutcome(idea=idea, persisted=True, error="This project has no blueprint to save")
        try:
            self.store.save_blueprint(idea_id, blueprint, owner_id)
        except StoreError as e:
            logger.error("saving blueprint for %s failed: %s", idea_id, e)
            return SaveOutcome(idea=idea, persisted=True, error=f"Failed to save blueprint: {e.message}",
                               code=e.code)
        if self.session.holds(idea_id):
            self.session.mark_saved(True)
        return SaveOutcome(idea=idea, persisted=True, blueprint_saved=True)

    def delete_project(self, idea_id: str, owner_id: Optional[str] = None) -> None:
        held = self.session.holds(idea_id)
        if held:
            self.session.clear()
        if not self._remote(owner_id):
            if not held:
                raise NotFoundError(f"idea {idea_id} not found")
            return
        try:
            self.store.delete_idea(idea_id, owner_id)
        except NotFoundError:
            if not held:
                raise

    # reads

    def _session_projects(self) -> List[Project]:
        idea = self.session.idea()
        if idea is None:
            return []
        return [_project(idea, self.session.blueprint(), saved=self.session.saved())]

    def list_projects(self, owner_id: Optional[str] = None) -> List[Project]:
        session_projects = self._session_projects()
        if not self._remote(owner_id):
            return session_projects
        try:
            ideas = self.store.list_ideas(owner_id)
            blueprints = self.store.list_blueprints(i.id for i in ideas)
        except StoreError as e:
            logger.error("loading projects for %s failed: %s", owner_id, e)
            return session_projects
        server_projects = [_project(i, blueprints.get(i.id)) for i in ideas]
        return merge_by_id(session_projects, server_projects)

    def get_project(self, idea_id: str, owner_id: Optional[str] = None) -> Tuple[Idea, Optional[Blueprint]]:
        if self.session.holds(idea_id):
            return self.session.idea(), self.session.blueprint()
        if not self._remote(owner_id):
            raise NotFoundError(f"idea {idea_id} not found")
        return self.store.get_idea(idea_id, owner_id), self.store.get_blueprint(idea_id, owner_id)

    def dashboard_metrics(self, owner_id: Optional[str] = None) -> dict:
        return dashboard_metrics(p.progress for p in self.list_projects(owner_id))

    # tasks

    def list_tasks(self, owner_id: Optional[str] = None) -> List[TaskItem]:
        session_tasks: List[TaskItem] = []
        idea = self.session.idea()
        if idea is not None:
            session_tasks = derive_tasks(idea.id, self.session.blueprint(), idea.title)
        if not self._remote(owner_id):
            return session_tasks
        try:
            ideas = self.store.list_ideas(owner_id)
            blueprints = self.store.list_blueprints(i.id for i in ideas)
        except StoreError as e:
            logger.error("loading tasks for %s failed: %s", owner_id, e)
            return session_tasks
        server_tasks = [t for i in ideas for t in derive_tasks(i.id, blueprints.get(i.id), i.title)]
        return merge_by_id(session_tasks, server_tasks)

    def _mutate_tasks(self, idea_id: str, owner_id: Optional[str],
                      mutate: Callable[[List[BlueprintTask]], List[BlueprintTask]]) -> None:
        touched = False
        if self.session.holds(idea_id):
            blueprint = self.session.blueprint()
            if blueprint is not None:
                blueprint.tasks = mutate(list(blueprint.tasks))
                self.session.put_blueprint(blueprint)
                touched = True
        if self._remote(owner_id):
            try:
                blueprint = self.store.get_blueprint(idea_id, owner_id)
            except NotFoundError:
                if not touched:
                    raise
                blueprint = None
            if blueprint is not None:
                self.store.update_tasks(idea_id, mutate(list(blueprint.tasks)), owner_id)
                touched = True
        if not touched:
            raise NotFoundError(f"no tasks for idea {idea_id}")

    def update_task_status(self, task_id: str, status: str, owner_id: Optional[str] = None) -> None:
        if status not in TASK_STATUSES:
            raise ValueError(f"status must be one of {', '.join(TASK_STATUSES)}")
        idea_id, index = parse_task_id(task_id)

        def apply(tasks):
            if index >= len(tasks):
                raise NotFoundError(f"task {task_id} not found")
            tasks[index] = tasks[index].model_copy(update={"status": status})
            return tasks

        self._mutate_tasks(idea_id, owner_id, apply)
        logger.info("task %s -> %s", task_id, status)

    def delete_task(self, task_id: str, owner_id: Optional[str] = None) -> None:
        idea_id, index = parse_task_id(task_id)

        def apply(tasks):
            if index >= len(tasks):
                raise NotFoundError(f"task {task_id} not found")
            return [t for i, t in enumerate(tasks) if i != index]

        self._mutate_tasks(idea_id, owner_id, apply)
        logger.info("task %s deleted", task_id)
