"""Canned explanatory copy shown next to generated strengths and weaknesses."""
from typing import Dict

STRENGTH_CONTEXTS = (
    "This differentiator can position your product favorably against competitors and create strong market appeal.",
    "Leveraging this strength could significantly enhance user adoption and retention rates.",
    "This advantage could be central to your unique value proposition and messaging strategy.",
    "This strength aligns with current market trends and could accelerate early adoption.",
    "This feature addresses a critical pain point and could become a key selling point.",
    "This capability provides a competitive edge in the current market landscape.",
    "This could be a major factor in user retention and satisfaction.",
    "This strength could substantially reduce customer acquisition costs and increase lifetime value.",
    "This aspect could create powerful network effects as your user base grows.",
    "This strength addresses a significant gap in the current market offerings.",
)

WEAKNESS_CONTEXTS = (
    "Addressing this challenge early in development could prevent significant roadblocks later.",
    "Consider prioritizing this concern in your MVP roadmap to validate potential solutions.",
    "This potential barrier could affect user acquisition if not properly managed.",
    "Developing a clear strategy around this challenge will strengthen your go-to-market approach.",
    "Research how competitors handle this issue to develop a more competitive solution.",
    "This challenge might require additional resources or expertise to properly address.",
    "User testing could help you identify the most effective approaches to solve this issue.",
    "This concern might impact your pricing strategy and overall business model.",
    "A phased approach to addressing this challenge could maintain momentum while mitigating risks.",
    "This limitation could affect scalability if not addressed strategically.",
)

DEFAULT_PILLARS = {
    "Market Fit": 7,
    "Uniqueness": 8,
    "Scalability": 7,
    "Revenue": 6,
    "Execution": 7,
    "Expertise": 6,
}


def strength_context(index: int) -> str:
    return STRENGTH_CONTEXTS[index % len(STRENGTH_CONTEXTS)]


def weakness_context(index: int) -> str:
    return WEAKNESS_CONTEXTS[index % len(WEAKNESS_CONTEXTS)]


def weakness_priority(index: int) -> str:
    if index == 0:
        return "Critical"
    if index in (1, 2):
        return "High"
    if index in (3, 4):
        return "Medium"
    return "Low"


def star_count(score: float) -> int:
    """Filled stars out of five for a 0-10 score."""
    return max(0, min(5, int(score / 2 + 0.5)))


def display_pillars(pillars: Dict[str, float] | None) -> Dict[str, float]:
    return dict(pillars) if pillars else dict(DEFAULT_PILLARS)
