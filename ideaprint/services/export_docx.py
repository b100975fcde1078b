from docx import Document
from ideaprint.config import settings
from ideaprint.schemas import Blueprint, Idea
from ideaprint.services.insights import display_pillars, weakness_priority
import io, os
from typing import Any

def _h(doc, text, lvl=1): doc.add_heading(text, level=lvl)
def _p(doc, text): doc.add_paragraph(text)
def _bullets(doc, items):
    for it in items: doc.add_paragraph(str(it), style="List Bullet")

def _free_form(doc, value: Any, lvl: int = 2):
    if isinstance(value, dict):
        for k, v in value.items():
            _h(doc, str(k).replace("_", " ").title(), lvl)
            _free_form(doc, v, min(lvl + 1, 4))
    elif isinstance(value, list):
        _bullets(doc, [v if not isinstance(v, dict) else ", ".join(f"{k}: {x}" for k, x in v.items()) for v in value])
    elif value not in (None, ""):
        _p(doc, str(value))

def _compose(idea: Idea, blueprint: Blueprint):
    doc = Document()
    _h(doc, f"{idea.title} Blueprint", 0)
    _p(doc, idea.description)
    _p(doc, f"Validation score: {blueprint.validation.score:g}/10 | Idea ID: {idea.id}")

    v = blueprint.validation
    _h(doc, "Validation", 1)
    if v.feedback: _p(doc, v.feedback)
    _h(doc, "Pillars", 2)
    _bullets(doc, [f"{name}: {score:g}/10" for name, score in sorted(display_pillars(v.pillars).items())])
    if v.strengths:
        _h(doc, "Strengths", 2); _bullets(doc, v.strengths)
    if v.weaknesses:
        _h(doc, "Challenges", 2)
        _bullets(doc, [f"[{weakness_priority(i)}] {w}" for i, w in enumerate(v.weaknesses)])
    if v.improvements:
        _h(doc, "Improvements", 2); _bullets(doc, v.improvements)

    _h(doc, "Features", 1)
    for tier in ("core", "premium", "future"):
        items = getattr(blueprint.features, tier)
        if items:
            _h(doc, tier.title(), 2); _bullets(doc, items)

    _h(doc, "Tech Stack", 1)
    for layer, items in blueprint.tech_stack.model_dump().items():
        if items:
            _h(doc, layer.title(), 2); _bullets(doc, items)

    _h(doc, "Pricing", 1)
    if blueprint.pricing_model.strategy: _p(doc, blueprint.pricing_model.strategy)
    for tier in blueprint.pricing_model.tiers:
        _h(doc, f"{tier.name} ({tier.price})" if tier.price else tier.name, 2)
        _bullets(doc, tier.features)

    for title, section in (("Market", blueprint.market), ("Market Analysis", blueprint.market_analysis),
                           ("Competitor Analysis", blueprint.competitor_analysis),
                           ("Marketing Strategy", blueprint.marketing_strategy),
                           ("Development Timeline", blueprint.development_timeline)):
        if section:
            _h(doc, title, 1); _free_form(doc, section)

    if blueprint.tasks:
        _h(doc, "Tasks", 1)
        for t in blueprint.tasks:
            _h(doc, t.title, 2)
            _p(doc, f"{t.priority} priority | {t.category} | {t.status}")
            if t.description: _p(doc, t.description)

    if blueprint.user_flow:
        _h(doc, "User Flow (mermaid)", 1)
        _p(doc, blueprint.user_flow)

    return doc

def build_doc(idea: Idea, blueprint: Blueprint) -> str:
    os.makedirs(settings.EXPORT_DIR, exist_ok=True)
    outpath = os.path.join(settings.EXPORT_DIR, f"{idea.id}.docx")
    _compose(idea, blueprint).save(outpath)
    return outpath

def doc_bytes(idea: Idea, blueprint: Blueprint) -> bytes:
    """The same document, in memory."""
    buf = io.BytesIO()
    _compose(idea, blueprint).save(buf)
    return buf.getvalue()
