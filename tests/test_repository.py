import json, pytest
from ideaprint.services.repository import IdeaRepository, merge_by_id
from ideaprint.services.session_store import BLUEPRINT_KEY, IDEA_KEY, KEYS, SAVED_KEY, SessionStore
from ideaprint.services.store import AccessPolicyError, NotFoundError, StoreError

class FailingBlueprints:
    """Store whose blueprint writes always fail."""
    def __init__(self, store):
        self._store = store
    def __getattr__(self, name):
        return getattr(self._store, name)
    def save_blueprint(self, *args, **kwargs):
        raise StoreError("disk full")

class Unreachable:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StoreError("connection refused")
        return fail

class PolicyDenied(Unreachable):
    def create_idea(self, *args, **kwargs):
        raise AccessPolicyError("The database refused this write under its access policy.")

def test_merge_puts_session_first_and_dedupes():
    session = [{"id": "a", "v": "session"}]
    server = [{"id": "b"}, {"id": "a", "v": "server"}, {"id": "c"}]
    merged = merge_by_id(session, server)
    assert [m["id"] for m in merged]==["a", "b", "c"]
    assert merged[0]["v"]=="session"

def test_merge_is_idempotent():
    session = [{"id": "a"}, {"id": "x"}]
    server = [{"id": "b"}, {"id": "a"}]
    once = merge_by_id(session, server)
    assert merge_by_id(once, server)==once
    assert merge_by_id([], [])==[]

def test_anonymous_save_stays_in_session(blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), store=None)
    outcome = repo.save_generated("Task Tracker", "A tool for teams", blueprint)
    assert not outcome.persisted and outcome.error is None
    assert set(mapping)==set(KEYS) and json.loads(mapping[SAVED_KEY]) is False
    projects = repo.list_projects()
    assert [p.id for p in projects]==[outcome.idea.id] and projects[0].saved is False
    assert projects[0].progress==100 and projects[0].status=="completed"

def test_authenticated_save_persists_and_rewrites_session(store, blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), store)
    outcome = repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1")
    assert outcome.persisted and outcome.blueprint_saved and outcome.warning is None
    assert json.loads(mapping[IDEA_KEY])["id"]==outcome.idea.id
    assert store.get_blueprint(outcome.idea.id, "u1") is not None
    # the same idea on both tiers is listed once
    assert [p.id for p in repo.list_projects("u1")]==[outcome.idea.id]

def test_blueprint_failure_is_a_warning(store, blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), FailingBlueprints(store))
    outcome = repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1")
    assert outcome.persisted and not outcome.blueprint_saved
    assert outcome.error is None and "blueprint could not be saved" in outcome.warning
    assert [i.id for i in store.list_ideas("u1")]==[outcome.idea.id]
    assert SessionStore(mapping).blueprint() is not None

def test_access_policy_failure_is_an_error(blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), PolicyDenied())
    outcome = repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1")
    assert not outcome.persisted and outcome.code=="42501"
    assert "access policy" in outcome.error
    # the generated result is still available for this tab
    assert SessionStore(mapping).holds(outcome.idea.id)

def test_list_falls_back_to_session_when_store_fails(blueprint):
    repo = IdeaRepository(SessionStore({}), Unreachable())
    repo.save_generated("Task Tracker", "A tool for teams", blueprint)
    assert len(repo.list_projects("u1"))==1
    assert len(repo.list_tasks("u1"))==3

@pytest.mark.parametrize("owner", [None, "u1"])
def test_delete_clears_session_keys(store, blueprint, owner):
    mapping = {"unrelated": "keep"}
    repo = IdeaRepository(SessionStore(mapping), store)
    idea = repo.save_generated("Task Tracker", "A tool for teams", blueprint, owner).idea
    repo.delete_project(idea.id, owner)
    assert not any(k in mapping for k in (IDEA_KEY, BLUEPRINT_KEY, SAVED_KEY))
    assert mapping=={"unrelated": "keep"}
    if owner:
        assert store.list_ideas(owner)==[]

def test_delete_unknown_project(store):
    repo = IdeaRepository(SessionStore({}), store)
    with pytest.raises(NotFoundError):
        repo.delete_project("missing")
    with pytest.raises(NotFoundError):
        repo.delete_project("missing", "u1")

def test_mark_saved_persists_session_project(store, blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), store)
    idea = repo.save_generated("Task Tracker", "A tool for teams", blueprint).idea
    outcome = repo.mark_saved(idea.id, "u1")
    assert outcome.persisted and outcome.blueprint_saved
    assert SessionStore(mapping).saved() is True
    assert len(store.list_ideas("u1"))==1

def test_task_updates_reach_both_tiers(store, blueprint):
    mapping = {}
    repo = IdeaRepository(SessionStore(mapping), store)
    idea = repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1").idea
    tasks = repo.list_tasks("u1")
    assert len(tasks)==3 and tasks[0].id==f"{idea.id}-task-0" and tasks[0].project=="Task Tracker"

    repo.update_task_status(tasks[0].id, "Done", "u1")
    assert SessionStore(mapping).blueprint().tasks[0].status=="Done"
    assert store.get_blueprint(idea.id, "u1").tasks[0].status=="Done"

    repo.delete_task(tasks[2].id, "u1")
    assert len(SessionStore(mapping).blueprint().tasks)==2
    assert len(store.get_blueprint(idea.id, "u1").tasks)==2

def test_task_update_validation(store, blueprint):
    repo = IdeaRepository(SessionStore({}), store)
    idea = repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1").idea
    with pytest.raises(ValueError):
        repo.update_task_status(f"{idea.id}-task-0", "Blocked", "u1")
    with pytest.raises(NotFoundError):
        repo.update_task_status(f"{idea.id}-task-9", "Done", "u1")
    with pytest.raises(ValueError):
        repo.delete_task("not-a-task-id", "u1")

def test_dashboard_metrics(store, blueprint):
    repo = IdeaRepository(SessionStore({}), store)
    repo.save_generated("Task Tracker", "A tool for teams", blueprint, "u1")
    store.create_idea("Bare idea", "No blueprint yet", "u1", 4)
    assert repo.dashboard_metrics("u1")=={"total": 2, "inProgress": 1, "completed": 1}

def test_merge_collapses_duplicate_session_items():
    a, b = {"id": "a"}, {"id": "b"}
    assert merge_by_id([a, a], [b])==[a, b]
    session = [a, {"id": "x"}]
    server = [b, {"id": "a", "v": "server"}]
    assert merge_by_id(session + session, server)==merge_by_id(session, server)==[a, {"id": "x"}, b]

def test_mark_saved_reports_unreachable_store(blueprint):
    repo = IdeaRepository(SessionStore({}), Unreachable())
    idea = repo.save_generated("Task Tracker", "A tool for teams", blueprint).idea
    outcome = repo.mark_saved(idea.id, "u1")
    assert outcome.error=="connection refused" and not outcome.blueprint_saved
    outcome = repo.mark_saved("elsewhere", "u1")
    assert outcome.idea is None and outcome.error=="connection refused"

def test_mark_saved_reports_access_policy(store, blueprint):
    owned = store.create_idea("Task Tracker", "A tool for teams", "u1", 7)
    repo = IdeaRepository(SessionStore({}), store)
    outcome = repo.mark_saved(owned.id, "u2")
    assert outcome.code=="42501" and outcome.error
