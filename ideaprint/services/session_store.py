import json
import logging
from typing import MutableMapping, Optional

from ideaprint.schemas import Blueprint, Idea
from ideaprint.services.codec import CodecError, blueprint_to_json, decode_blueprint, decode_idea, idea_to_json

logger = logging.getLogger(__name__)

IDEA_KEY = "currentIdea"
BLUEPRINT_KEY = "currentBlueprint"
SAVED_KEY = "projectSaved"
KEYS = (IDEA_KEY, BLUEPRINT_KEY, SAVED_KEY)


class SessionStore:
    """Local tier: one idea/blueprint pair held as JSON in a per-tab mapping.

    ``mapping`` is ``st.session_state`` in the UI and a plain dict in tests.
    Reads and writes are last-writer-wins.
    """

    def __init__(self, mapping: MutableMapping):
        self.mapping = mapping

    def idea(self) -> Optional[Idea]:
        return decode_idea(self.mapping.get(IDEA_KEY))

    def blueprint(self) -> Optional[Blueprint]:
        raw = self.mapping.get(BLUEPRINT_KEY)
        if raw is None:
            return None
        try:
            return decode_blueprint(raw)
        except CodecError as e:
            logger.warning("discarding unreadable session blueprint: %s", e)
            return None

    def saved(self) -> bool:
        return json.loads(self.mapping.get(SAVED_KEY, "false")) is True

    def holds(self, idea_id: str) -> bool:
        idea = self.idea()
        return idea is not None and idea.id == idea_id

    def put(self, idea: Idea, blueprint: Blueprint, saved: bool = False) -> None:
        self.mapping[IDEA_KEY] = idea_to_json(idea)
        self.mapping[BLUEPRINT_KEY] = blueprint_to_json(blueprint)
        self.mapping[SAVED_KEY] = json.dumps(saved)

    def put_blueprint(self, blueprint: Blueprint) -> None:
        self.mapping[BLUEPRINT_KEY] = blueprint_to_json(blueprint)

    def mark_saved(self, saved: bool = True) -> None:
        self.mapping[SAVED_KEY] = json.dumps(saved)

    def clear(self) -> None:
        for key in KEYS:
            if key in self.mapping:
                del self.mapping[key]
