"""Single encode/decode boundary for blueprints and ideas.

Stored rows use snake_case columns holding JSON-native values; the session
tier and the HTTP API use camelCase JSON. Everything read from either side
goes through ``decode_blueprint`` so older rows with stringified sections or
alternate key spellings are normalised once, here.
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from ideaprint.schemas import Blueprint, Idea

logger = logging.getLogger(__name__)

ROW_SECTIONS = (
    "validation", "features", "tech_stack", "pricing_model", "market",
    "market_analysis", "competitor_analysis", "marketing_strategy",
    "development_timeline", "target_audience", "user_experience",
)

# spellings seen in older writes, mapped onto the canonical field name
_ALTERNATES = {
    "techStack": "tech_stack", "technology": "tech_stack",
    "pricingModel": "pricing_model", "pricing": "pricing_model",
    "userFlow": "user_flow", "userflow": "user_flow",
    "marketAnalysis": "market_analysis",
    "competitorAnalysis": "competitor_analysis", "competitors": "competitor_analysis",
    "marketingStrategy": "marketing_strategy", "marketing": "marketing_strategy",
    "developmentTimeline": "development_timeline", "timeline": "development_timeline",
    "targetAudience": "target_audience", "audience": "target_audience",
    "userExperience": "user_experience", "ux": "user_experience",
}

_META = ("id", "idea_id", "ideaId", "created_at", "updated_at", "progress")


class CodecError(ValueError):
    pass


def _maybe_json(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text[:1] in ("{", "[") and text[-1:] in ("}", "]"):
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                return value
    return value


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == {} or value == []


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Fold every known spelling onto the snake_case field names."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _META:
            continue
        name = _ALTERNATES.get(key, key)
        value = value if name == "user_flow" else _maybe_json(value)
        # first non-empty spelling wins
        if name in out and not _is_empty(out[name]):
            continue
        out[name] = value
    return out


def decode_blueprint(data: Union[str, Mapping[str, Any], None]) -> Blueprint:
    if data is None:
        raise CodecError("no blueprint data")
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise CodecError(f"blueprint is not valid JSON: {e}") from e
    if not isinstance(data, Mapping):
        raise CodecError(f"blueprint must be an object, got {type(data).__name__}")
    try:
        return Blueprint.model_validate(normalize_keys(data))
    except ValidationError as e:
        raise CodecError(str(e)) from e


def encode_blueprint(blueprint: Blueprint) -> Dict[str, Any]:
    """Blueprint -> column values for ``BlueprintRecord``."""
    dumped = blueprint.model_dump(mode="json")
    row = {name: dumped[name] for name in ROW_SECTIONS}
    row["tasks"] = dumped["tasks"]
    row["user_flow"] = dumped["user_flow"]
    return row


def blueprint_to_json(blueprint: Blueprint) -> str:
    return json.dumps(blueprint.dump())


def decode_idea(data: Union[str, Mapping[str, Any], None]) -> Optional[Idea]:
    if data is None:
        return None
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError:
            logger.warning("discarding unreadable idea payload")
            return None
    try:
        return Idea.model_validate(dict(data))
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning("discarding malformed idea payload: %s", e)
        return None


def idea_from_record(record) -> Idea:
    return Idea(id=record.id, title=record.title, description=record.description,
                validation_score=record.validation_score, created_at=record.created_at,
                owner_id=record.user_id)


def idea_to_json(idea: Idea) -> str:
    return json.dumps(idea.dump())
