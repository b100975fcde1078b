from sqlmodel import SQLModel, Field, Column, JSON
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
import uuid

def _now():
    return datetime.now(timezone.utc)

class IdeaRecord(SQLModel, table=True):
    __tablename__ = "ideas"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    title: str = Field(max_length=255)
    description: str
    user_id: str = Field(index=True)
    validation_score: float = 5.0
    rating: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

class BlueprintRecord(SQLModel, table=True):
    __tablename__ = "blueprints"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    idea_id: str = Field(foreign_key="ideas.id", index=True, unique=True)
    validation: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    features: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    tech_stack: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    pricing_model: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    market: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    market_analysis: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    competitor_analysis: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    marketing_strategy: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    development_timeline: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    target_audience: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    user_experience: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    tasks: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    user_flow: Optional[str] = ""
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
