import hashlib
import json
import logging
import random
from typing import Any, Dict, Optional

from ideaprint.config import settings
from ideaprint.schemas import Blueprint, PILLARS
from ideaprint.services.codec import CodecError, decode_blueprint

logger = logging.getLogger(__name__)

# inclusive bands the mock draws pillar scores from
MOCK_PILLAR_BANDS = {
    "Market Fit": (5, 8),
    "Uniqueness": (4, 8),
    "Scalability": (5, 8),
    "Revenue": (4, 7),
    "Execution": (5, 8),
    "Expertise": (4, 7),
}
MOCK_SCORE_BAND = (5, 8)


class BlueprintParseError(ValueError):
    pass


def build_prompt(title: str, description: str) -> str:
    pillars = ", ".join(f'"{p}": number from 0-10' for p in PILLARS)
    return f"""
Generate a comprehensive SaaS idea validation and blueprint for: "{title}"

Description: {description}

Your response should be in JSON format with the following structure:
{{
  "validation": {{
    "score": number from 1-10,
    "feedback": "detailed feedback on strengths and weaknesses",
    "strengths": ["strength1", "strength2", "strength3"],
    "weaknesses": ["weakness1", "weakness2", "weakness3"],
    "improvements": ["suggestion1", "suggestion2", "suggestion3"],
    "pillars": {{{pillars}}}
  }},
  "features": {{
    "core": ["feature1", "feature2", "feature3"],
    "premium": ["premium1", "premium2"],
    "future": ["future1", "future2"]
  }},
  "techStack": {{
    "frontend": ["technology1", "technology2"],
    "backend": ["technology1", "technology2"],
    "database": ["technology1"],
    "hosting": ["technology1"],
    "other": ["technology1", "technology2"]
  }},
  "pricingModel": {{
    "tiers": [
      {{"name": "Free", "price": "$0", "features": ["feature1", "feature2"]}},
      {{"name": "Pro", "price": "$X/month", "features": ["feature1", "feature2", "feature3"]}}
    ],
    "strategy": "Brief pricing strategy explanation"
  }},
  "market": {{"size": "...", "trends": ["..."]}},
  "marketAnalysis": {{"summary": "...", "segments": ["..."]}},
  "competitorAnalysis": {{"competitors": ["..."], "differentiation": "..."}},
  "marketingStrategy": {{"channels": ["..."], "summary": "..."}},
  "developmentTimeline": {{"phases": [{{"name": "...", "duration": "..."}}]}},
  "userFlow": "mermaid flowchart code for user flow diagram",
  "tasks": [
    {{
      "title": "Task 1",
      "description": "Description",
      "priority": "High/Medium/Low",
      "category": "Frontend/Backend/Design/etc"
    }}
  ]
}}
"""


def extract_json(text: str) -> Dict[str, Any]:
    """Parse the span from the first '{' to the last '}' of a model reply."""
    if not text:
        raise BlueprintParseError("empty response")
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise BlueprintParseError("Failed to parse JSON response")
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise BlueprintParseError(f"Failed to parse JSON response: {e}") from e
    if not isinstance(data, dict):
        raise BlueprintParseError("response JSON is not an object")
    return data


def _seeded_rng(title: str, description: str) -> random.Random:
    digest = hashlib.sha256(f"{title}\x00{description}".encode("utf-8")).hexdigest()
    return random.Random(int(digest[:16], 16))


def mock_blueprint(title: str, description: str, rng: Optional[random.Random] = None) -> Blueprint:
    rng = rng or _seeded_rng(title, description)
    pillars = {name: rng.randint(lo, hi) for name, (lo, hi) in MOCK_PILLAR_BANDS.items()}
    score = rng.randint(*MOCK_SCORE_BAND)
    name = title or "This idea"
    return Blueprint.model_validate({
        "validation": {
            "score": score,
            "feedback": f"{name} shows promise. The concept addresses a clear need in the market. "
                        "Consider refining the target audience and feature prioritization.",
            "strengths": ["Clear problem statement", "Recurring revenue potential", "Low infrastructure cost to start"],
            "weaknesses": ["Crowded market segment", "Unproven willingness to pay", "Depends on early adopters"],
            "improvements": [
                "Focus on a more specific target audience",
                "Prioritize core features for MVP",
                "Develop a clearer monetization strategy",
            ],
            "pillars": pillars,
        },
        "features": {
            "core": ["User authentication", "Dashboard analytics", "File management"],
            "premium": ["Advanced reporting", "Team collaboration"],
            "future": ["AI-powered recommendations", "Integration marketplace"],
        },
        "techStack": {
            "frontend": ["React", "Next.js", "Tailwind CSS"],
            "backend": ["Python", "FastAPI"],
            "database": ["PostgreSQL"],
            "hosting": ["Vercel"],
            "other": ["Stripe"],
        },
        "pricingModel": {
            "tiers": [
                {"name": "Free", "price": "$0", "features": ["Limited access to core features", "Single user"]},
                {"name": "Pro", "price": "$19/month",
                 "features": ["Full access to core features", "Basic premium features", "Up to 5 users"]},
                {"name": "Enterprise", "price": "$49/month",
                 "features": ["All features", "Priority support", "Unlimited users"]},
            ],
            "strategy": "Freemium model with clear upgrade path based on scaling needs",
        },
        "marketAnalysis": {"summary": f"Early-stage market for {name}; validate demand with a landing page."},
        "userFlow": "graph TD\n  A[User Sign Up] --> B[Onboarding]\n  B --> C[Dashboard]\n  C --> D[Create Project]\n"
                    "  D --> E[Manage Project]\n  E --> F[Generate Reports]\n  C --> G[Account Settings]",
        "tasks": [
            {"title": "Set up authentication system",
             "description": "Implement user signup, login, and password reset",
             "priority": "High", "category": "Backend"},
            {"title": "Design dashboard UI",
             "description": "Create wireframes and mockups for the main dashboard",
             "priority": "High", "category": "Design"},
            {"title": "Implement payment processing",
             "description": "Integrate with Stripe for subscription management",
             "priority": "Medium", "category": "Backend"},
        ],
    })


def _call_llm(title: str, description: str, client=None) -> str:
    if client is None:
        if not settings.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY is not configured")
        from openai import OpenAI
        client = OpenAI(api_key=settings.OPENAI_API_KEY)
    resp = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        temperature=0.4,
        messages=[{"role": "system", "content": "You are a SaaS product strategist. Reply with JSON only."},
                  {"role": "user", "content": build_prompt(title, description)}],
    )
    return resp.choices[0].message.content or ""


def _fill_gaps(blueprint: Blueprint, title: str, description: str) -> Blueprint:
    """Complete the pillar map from the mock when the model left some out."""
    missing = [p for p in PILLARS if p not in blueprint.validation.pillars]
    if missing:
        fallback = mock_blueprint(title, description).validation.pillars
        for p in missing:
            blueprint.validation.pillars[p] = fallback[p]
    return blueprint


def generate_blueprint(title: str, description: str, client=None) -> Blueprint:
    """Blueprint from the LLM, or the mock on any failure. Never raises."""
    try:
        logger.info("generating blueprint for %r with %s", title, settings.OPENAI_MODEL)
        raw = extract_json(_call_llm(title, description, client))
        return _fill_gaps(decode_blueprint(raw), title, description)
    except (BlueprintParseError, CodecError) as e:
        logger.warning("unusable model response for %r, returning mock data: %s", title, e)
    except Exception as e:
        logger.warning("generation failed for %r, returning mock data: %s", title, e)
    return mock_blueprint(title or "", description or "")
