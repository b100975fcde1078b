from fastapi import Header, HTTPException, Request
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine
from ideaprint.config import settings
from ideaprint.services.store import IdeaStore
import os

def make_engine(url: str):
    kwargs = {"echo": False}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            os.makedirs(settings.DATA_DIR, exist_ok=True)
    return create_engine(url, **kwargs)

def build_store(url: str | None = None) -> IdeaStore:
    store = IdeaStore(make_engine(url or settings.DB_URL))
    store.create_schema()
    return store

def get_store(request: Request) -> IdeaStore:
    return request.app.state.store

def get_owner(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="You must be logged in to use this API")
    return x_user_id

def get_optional_owner(x_user_id: str | None = Header(default=None)) -> str | None:
    return x_user_id or None
