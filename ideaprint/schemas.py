"""Domain shapes shared by the API, the session tier and the store.

Attributes are snake_case in Python; the camelCase spelling of every field
is accepted on input and produced by ``dump()`` for the HTTP/session side.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import math
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PILLARS = ("Market Fit", "Uniqueness", "Scalability", "Revenue", "Execution", "Expertise")
TASK_STATUSES = ("Todo", "In Progress", "Done")
TASK_PRIORITIES = ("High", "Medium", "Low")


def clamp_score(value: Any, default: float = 5.0) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(score):
        return default
    return min(max(score, 0.0), 10.0)


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore",
                              coerce_numbers_to_str=True)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Validation(_Model):
    score: float = 5.0
    feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    pillars: Dict[str, float] = Field(default_factory=dict)

    @field_validator("score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)

    @field_validator("pillars", mode="before")
    @classmethod
    def _pillars(cls, v):
        if not isinstance(v, dict):
            return {}
        out = {}
        for name, raw in v.items():
            try:
                val = float(raw)
            except (TypeError, ValueError):
                continue
            if math.isnan(val):
                continue
            out[str(name)] = min(max(val, 0.0), 10.0)
        return out


class Features(_Model):
    core: List[str] = Field(default_factory=list)
    premium: List[str] = Field(default_factory=list)
    future: List[str] = Field(default_factory=list)


class TechStack(_Model):
    frontend: List[str] = Field(default_factory=list)
    backend: List[str] = Field(default_factory=list)
    database: List[str] = Field(default_factory=list)
    hosting: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class PricingTier(_Model):
    name: str
    price: str = ""
    features: List[str] = Field(default_factory=list)


class PricingModel(_Model):
    tiers: List[PricingTier] = Field(default_factory=list)
    strategy: str = ""


class BlueprintTask(_Model):
    title: str
    description: str = ""
    priority: str = "Medium"
    category: str = "General"
    status: str = "Todo"

    @field_validator("description", "category", mode="before")
    @classmethod
    def _none_to_default(cls, v, info):
        if v is None or v == "":
            return "General" if info.field_name == "category" else ""
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return v if v in TASK_PRIORITIES else "Medium"

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return v if v in TASK_STATUSES else "Todo"


class Blueprint(_Model):
    validation: Validation = Field(default_factory=Validation)
    features: Features = Field(default_factory=Features)
    tech_stack: TechStack = Field(default_factory=TechStack)
    pricing_model: PricingModel = Field(default_factory=PricingModel)
    market: Any = Field(default_factory=dict)
    market_analysis: Any = Field(default_factory=dict)
    competitor_analysis: Any = Field(default_factory=dict)
    marketing_strategy: Any = Field(default_factory=dict)
    development_timeline: Any = Field(default_factory=dict)
    target_audience: Any = Field(default_factory=dict)
    user_experience: Any = Field(default_factory=dict)
    tasks: List[BlueprintTask] = Field(default_factory=list)
    user_flow: str = ""

    @field_validator("user_flow", mode="before")
    @classmethod
    def _flow(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("tasks", mode="before")
    @classmethod
    def _tasks(cls, v):
        if not isinstance(v, list):
            return []
        return [t for t in v if isinstance(t, (dict, BlueprintTask)) and (
            isinstance(t, BlueprintTask) or t.get("title"))]


class Idea(_Model):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    title: str
    description: str
    validation_score: float = 5.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    owner_id: Optional[str] = None

    @field_validator("validation_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_score(v)


class Project(_Model):
    """An idea as listed on the dashboard/projects views."""
    id: str
    title: str
    description: str
    validation_score: float
    created_at: datetime
    status: str = "planning"
    progress: int = 0
    saved: bool = True


class TaskItem(_Model):
    id: str
    idea_id: str
    index: int
    project: str = ""
    title: str
    description: str = ""
    priority: str = "Medium"
    category: str = "General"
    status: str = "Todo"
