"""Remote tier: ideas and blueprints persisted through SQLModel.

One ``IdeaStore`` is built per engine and handed to callers (see
``ideaprint.deps.get_store``); nothing here keeps module-level state.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from ideaprint.models import BlueprintRecord, IdeaRecord
from ideaprint.schemas import Blueprint, BlueprintTask, Idea, clamp_score
from ideaprint.services.codec import decode_blueprint, encode_blueprint, idea_from_record

logger = logging.getLogger(__name__)

ACCESS_POLICY_CODE = "42501"
ACCESS_POLICY_MESSAGE = (
    "The database refused this write under its access policy. Check that the row-level "
    "security policies (or file permissions) on the ideas and blueprints tables allow "
    "the configured database user to insert, update and delete its own rows."
)
_POLICY_MARKERS = ("row-level security", "row level security", "permission denied",
                   "insufficient privilege", "readonly database", "read-only")


class StoreError(Exception):
    code: Optional[str] = None

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class AccessPolicyError(StoreError):
    code = ACCESS_POLICY_CODE


class NotFoundError(StoreError):
    code = "not_found"


def diagnose(exc: Exception) -> StoreError:
    """Map a driver/ORM failure onto the store's error types."""
    if isinstance(exc, StoreError):
        return exc
    orig = getattr(exc, "orig", None) if isinstance(exc, DBAPIError) else None
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    text = str(orig if orig is not None else exc)
    if pgcode == ACCESS_POLICY_CODE or any(m in text.lower() for m in _POLICY_MARKERS):
        return AccessPolicyError(ACCESS_POLICY_MESSAGE, details=text)
    return StoreError(text, code=pgcode)


def prepare_idea(title: str, description: str, owner_id: str, validation_score) -> dict:
    clean_title = (title or "")[:255].strip()
    clean_description = (description or "").strip()
    if not clean_title:
        raise ValueError("Title is required")
    if not clean_description:
        raise ValueError("Description is required")
    if not owner_id:
        raise ValueError("User ID is required")
    now = datetime.now(timezone.utc)
    return {
        "title": clean_title,
        "description": clean_description,
        "user_id": owner_id,
        "validation_score": clamp_score(validation_score),
        "rating": 0,
        "created_at": now,
        "updated_at": now,
    }


class IdeaStore:
    def __init__(self, engine):
        self.engine = engine

    def create_schema(self):
        SQLModel.metadata.create_all(self.engine)

    @contextmanager
    def _session(self):
        try:
            with Session(self.engine) as session:
                yield session
        except StoreError:
            raise
        except SQLAlchemyError as e:
            err = diagnose(e)
            logger.error("store operation failed: %s", err.details or err.message)
            raise err from e

    def _owned(self, session: Session, idea_id: str, owner_id: Optional[str]) -> IdeaRecord:
        record = session.get(IdeaRecord, idea_id)
        if record is None:
            raise NotFoundError(f"idea {idea_id} not found")
        if owner_id is not None and record.user_id != owner_id:
            raise AccessPolicyError("Unauthorized or item not found")
        return record

    @staticmethod
    def _blueprint_record(session: Session, idea_id: str) -> Optional[BlueprintRecord]:
        return session.exec(select(BlueprintRecord).where(BlueprintRecord.idea_id == idea_id)).first()

    # ideas

    def create_idea(self, title: str, description: str, owner_id: str, validation_score) -> Idea:
        data = prepare_idea(title, description, owner_id, validation_score)
        with self._session() as session:
            record = IdeaRecord(**data)
            session.add(record); session.commit(); session.refresh(record)
            logger.info("created idea %s for %s", record.id, owner_id)
            return idea_from_record(record)

    def get_idea(self, idea_id: str, owner_id: Optional[str] = None) -> Idea:
        with self._session() as session:
            return idea_from_record(self._owned(session, idea_id, owner_id))

    def list_ideas(self, owner_id: str) -> List[Idea]:
        with self._session() as session:
            rows = session.exec(select(IdeaRecord).where(IdeaRecord.user_id == owner_id)
                                .order_by(IdeaRecord.created_at.desc())).all()
            return [idea_from_record(r) for r in rows]

    def delete_idea(self, idea_id: str, owner_id: Optional[str] = None) -> None:
        """Remove the blueprint row, then the idea row."""
        with self._session() as session:
            idea = self._owned(session, idea_id, owner_id)
            blueprint = self._blueprint_record(session, idea_id)
            if blueprint is not None:
                session.delete(blueprint)
                session.flush()
            session.delete(idea)
            session.commit()
            logger.info("deleted idea %s", idea_id)

    # blueprints

    def save_blueprint(self, idea_id: str, blueprint: Blueprint, owner_id: Optional[str] = None) -> str:
        row = encode_blueprint(blueprint)
        with self._session() as session:
            self._owned(session, idea_id, owner_id)
            record = self._blueprint_record(session, idea_id)
            if record is None:
                record = BlueprintRecord(idea_id=idea_id, **row)
                logger.info("creating blueprint for idea %s", idea_id)
            else:
                for key, value in row.items():
                    setattr(record, key, value)
                record.updated_at = datetime.now(timezone.utc)
                logger.info("updating blueprint %s for idea %s", record.id, idea_id)
            session.add(record); session.commit(); session.refresh(record)
            return record.id

    def get_blueprint(self, idea_id: str, owner_id: Optional[str] = None) -> Optional[Blueprint]:
        with self._session() as session:
            self._owned(session, idea_id, owner_id)
            record = self._blueprint_record(session, idea_id)
            return decode_blueprint(record.model_dump()) if record else None

    def list_blueprints(self, idea_ids: Iterable[str]) -> Dict[str, Blueprint]:
        ids = list(idea_ids)
        if not ids:
            return {}
        with self._session() as session:
            rows = session.exec(select(BlueprintRecord).where(BlueprintRecord.idea_id.in_(ids))).all()
            return {r.idea_id: decode_blueprint(r.model_dump()) for r in rows}

    def update_tasks(self, idea_id: str, tasks: List[BlueprintTask], owner_id: Optional[str] = None) -> None:
        with self._session() as session:
            self._owned(session, idea_id, owner_id)
            record = self._blueprint_record(session, idea_id)
            if record is None:
                raise NotFoundError(f"no blueprint for idea {idea_id}")
            # reassign so the JSON column is flagged dirty
            record.tasks = [t.model_dump() for t in tasks]
            record.updated_at = datetime.now(timezone.utc)
            session.add(record); session.commit()

    # diagnostics

    def check_connection(self) -> dict:
        try:
            with self._session() as session:
                session.exec(select(IdeaRecord.id).limit(1)).first()
        except StoreError as e:
            return {"connected": False, "message": e.message, "error": e.code}
        return {"connected": True, "message": "Connected to the database successfully", "error": None}

    def verify_tables(self) -> dict:
        try:
            inspector = inspect(self.engine)
        except SQLAlchemyError as e:
            return {"success": False, "message": diagnose(e).message}
        for table in ("ideas", "blueprints"):
            if not inspector.has_table(table):
                return {"success": False, "message": f"{table.capitalize()} table error: table is missing"}
        return {"success": True, "message": "Table structure verified"}

    def check_permissions(self, owner_id: str) -> dict:
        """Insert and remove a throwaway idea to confirm write access."""
        try:
            record = self.create_idea(f"Test Record {datetime.now(timezone.utc).isoformat()}",
                                      "This is a test record to verify access policies", owner_id, 5)
            self.delete_idea(record.id, owner_id)
        except AccessPolicyError as e:
            return {"success": False, "message": e.message, "error": e.code,
                    "suggestion": "Review the access policies on the ideas table for this user."}
        except StoreError as e:
            return {"success": False, "message": e.message, "error": e.code}
        return {"success": True, "message": "Permission check passed"}
