import streamlit as st

from ideaprint.config import settings
from ideaprint.deps import build_store
from ideaprint.logs import configure_logging
from ideaprint.charts.animation import BlockingScheduler, RadarAnimation
from ideaprint.charts.colors import score_color
from ideaprint.charts.radar import RadarChart
from ideaprint.charts.svg import render_svg
from ideaprint.schemas import TASK_STATUSES
from ideaprint.services import export_docx, generator
from ideaprint.services.insights import (display_pillars, star_count, strength_context,
                                         weakness_context, weakness_priority)
from ideaprint.services.repository import IdeaRepository
from ideaprint.services.session_store import SessionStore
from ideaprint.services.store import StoreError
from ideaprint.services.tasks import board

configure_logging(settings.LOG_LEVEL)

# ---------- Wiring ----------
@st.cache_resource
def get_store():
    return build_store()

def get_repository() -> IdeaRepository:
    return IdeaRepository(SessionStore(st.session_state), get_store())

GENERATION_STEPS = [
    "Analyzing project description",
    "Identifying core features",
    "Determining technical requirements",
    "Analyzing market potential",
    "Developing pricing strategy",
]

# ---------- Small renderers ----------
def badge(text: str, score: float) -> str:
    return (f'<span style="background:{score_color(score)};color:#fff;border-radius:6px;'
            f'padding:2px 8px;font-weight:600">{text}</span>')

def stars(score: float) -> str:
    n = star_count(score)
    return "★" * n + "☆" * (5 - n)

def radar_panel(pillars: dict, key: str):
    chart = RadarChart(display_pillars(pillars), size=320, device_pixel_ratio=2.0,
                       activation_radius=settings.RADAR_ACTIVATION_RADIUS)
    canvas = st.empty()
    played = st.session_state.setdefault("radar_played", [])
    if key not in played:
        animation = RadarAnimation(duration=settings.RADAR_ANIMATION_SECONDS)
        scheduler = BlockingScheduler()
        animation.on_frame(lambda p: canvas.markdown(render_svg(chart, p), unsafe_allow_html=True))
        animation.start(scheduler)
        scheduler.run()
        played.append(key)

    labels = ["None"] + chart.labels
    rows = [f"{label}  {value:g}/10" for label, value, _ in chart.legend()]
    choice = st.radio("Pillars", labels, horizontal=True, key=f"legend-{key}",
                      format_func=lambda l: l if l == "None" else rows[chart.labels.index(l)])
    chart.hover_legend(None if choice == "None" else choice)
    canvas.markdown(render_svg(chart), unsafe_allow_html=True)
    if chart.tooltip:
        t = chart.tooltip
        st.markdown(f"**{t.label}** {badge(f'{t.value:g}/10', t.value)}", unsafe_allow_html=True)

# ---------- Pages ----------
def page_generate(repo: IdeaRepository, owner: str | None):
    st.subheader("Validate a SaaS idea")
    with st.form("generate"):
        title = st.text_input("Project title")
        description = st.text_area("Describe your idea")
        submitted = st.form_submit_button("Generate blueprint")
    if not submitted:
        return
    if len(title.strip()) < 3:
        st.error("Title must be at least 3 characters"); return
    if len(description.strip()) < 10:
        st.error("Description must be at least 10 characters"); return

    bar = st.progress(0, text=GENERATION_STEPS[0])
    blueprint = generator.generate_blueprint(title.strip(), description.strip())
    for i, step in enumerate(GENERATION_STEPS, start=1):
        bar.progress(int(i / len(GENERATION_STEPS) * 100), text=step)
    outcome = repo.save_generated(title.strip(), description.strip(), blueprint, owner)
    if outcome.error:
        st.error(outcome.error)
    elif outcome.warning:
        st.toast(outcome.warning, icon="⚠️")
    else:
        st.toast("Blueprint generated", icon="✅")
    st.session_state["selected_project"] = outcome.idea.id
    st.success(f"Blueprint ready for **{outcome.idea.title}**. Open it from the Project page.")

def page_dashboard(repo: IdeaRepository, owner: str | None):
    st.subheader("Dashboard")
    metrics = repo.dashboard_metrics(owner)
    c1, c2, c3 = st.columns(3)
    c1.metric("Total projects", metrics["total"])
    c2.metric("In progress", metrics["inProgress"])
    c3.metric("Completed", metrics["completed"])

    projects = repo.list_projects(owner)
    if not projects:
        st.info("No projects yet. Generate your first blueprint.")
        return
    for p in projects:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                st.markdown(f"### {p.title}")
                st.caption(p.description)
                st.markdown(f"{badge(f'{p.validation_score:g}/10', p.validation_score)} {stars(p.validation_score)} "
                            f"&nbsp; {p.status.replace('_', ' ').title()}", unsafe_allow_html=True)
                st.progress(p.progress, text=f"{p.progress}% complete")
            with right:
                if st.button("Open", key=f"open-{p.id}"):
                    st.session_state["selected_project"] = p.id
                    st.session_state["page"] = "Project"
                    st.rerun()
                if st.button("Delete", key=f"del-{p.id}"):
                    try:
                        repo.delete_project(p.id, owner)
                        st.toast("Project deleted")
                    except StoreError as e:
                        st.error(e.message)
                    st.rerun()

def page_project(repo: IdeaRepository, owner: str | None):
    projects = repo.list_projects(owner)
    if not projects:
        st.info("No project selected.")
        return
    ids = [p.id for p in projects]
    current = st.session_state.get("selected_project")
    idx = ids.index(current) if current in ids else 0
    project_id = st.selectbox("Project", ids, index=idx,
                              format_func=lambda i: next(p.title for p in projects if p.id == i))
    st.session_state["selected_project"] = project_id
    try:
        idea, blueprint = repo.get_project(project_id, owner)
    except StoreError as e:
        st.error(e.message); return
    if blueprint is None:
        st.warning("The blueprint for this idea doesn't exist or has been deleted.")
        return

    st.title(idea.title)
    st.caption(idea.description)
    a, b, c = st.columns(3)
    if a.button("Save project", disabled=SessionStore(st.session_state).saved() and repo.session.holds(idea.id)):
        outcome = repo.mark_saved(idea.id, owner)
        if outcome.error:
            st.error(outcome.error)
        else:
            st.toast(outcome.warning or "Blueprint saved successfully!")
    if b.button("Delete project"):
        try:
            repo.delete_project(idea.id, owner)
        except StoreError as e:
            st.error(e.message)
        else:
            st.session_state.pop("selected_project", None)
            st.rerun()
    if c.button("Export .docx"):
        st.session_state["export"] = (idea.id, export_docx.doc_bytes(idea, blueprint))
    export = st.session_state.get("export")
    if export and export[0] == idea.id:
        c.download_button("Download .docx", data=export[1], file_name=f"{idea.id}.docx",
                          mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document")

    v = blueprint.validation
    tabs = st.tabs(["Validation", "Features", "Tech Stack", "Pricing", "Market", "User Flow", "Tasks"])
    with tabs[0]:
        st.markdown(f"## {badge(f'{v.score:g}/10', v.score)} {stars(v.score)}", unsafe_allow_html=True)
        if v.feedback:
            st.write(v.feedback)
        radar_panel(v.pillars, key=idea.id)
        col1, col2 = st.columns(2)
        with col1:
            st.markdown("#### Strengths")
            for i, s in enumerate(v.strengths):
                st.markdown(f"**{s}**  \n{strength_context(i)}")
        with col2:
            st.markdown("#### Challenges")
            for i, w in enumerate(v.weaknesses):
                st.markdown(f"**{w}** ({weakness_priority(i)})  \n{weakness_context(i)}")
        if v.improvements:
            st.markdown("#### Improvements")
            for imp in v.improvements:
                st.markdown(f"- {imp}")
    with tabs[1]:
        for tier in ("core", "premium", "future"):
            st.markdown(f"#### {tier.title()} features")
            for feat in getattr(blueprint.features, tier):
                st.markdown(f"- {feat}")
    with tabs[2]:
        cols = st.columns(5)
        for col, (layer, items) in zip(cols, blueprint.tech_stack.model_dump().items()):
            col.markdown(f"**{layer.title()}**")
            for item in items:
                col.markdown(f"- {item}")
    with tabs[3]:
        st.write(blueprint.pricing_model.strategy or "Tiered subscription model with monthly and annual plans")
        cols = st.columns(max(len(blueprint.pricing_model.tiers), 1))
        for col, tier in zip(cols, blueprint.pricing_model.tiers):
            col.markdown(f"### {tier.name}\n**{tier.price}**")
            for feat in tier.features:
                col.markdown(f"- {feat}")
    with tabs[4]:
        for name, section in (("Market", blueprint.market), ("Market analysis", blueprint.market_analysis),
                              ("Competitors", blueprint.competitor_analysis),
                              ("Marketing strategy", blueprint.marketing_strategy),
                              ("Development timeline", blueprint.development_timeline)):
            if section:
                st.markdown(f"#### {name}")
                st.json(section)
    with tabs[5]:
        st.code(blueprint.user_flow or "graph TD\n  A[Start]", language="mermaid")
    with tabs[6]:
        for t in blueprint.tasks:
            st.markdown(f"- **{t.title}** ({t.priority}, {t.category}) {t.status}")

def page_tasks(repo: IdeaRepository, owner: str | None):
    st.subheader("Task Board")
    tasks = repo.list_tasks(owner)
    f1, f2, f3, f4 = st.columns(4)
    search = f1.text_input("Search tasks")
    project = f2.selectbox("Project", ["all"] + sorted({t.project for t in tasks}))
    category = f3.selectbox("Category", ["all"] + sorted({t.category for t in tasks}))
    priority = f4.selectbox("Priority", ["all", "High", "Medium", "Low"])
    columns = board(tasks, search=search, project=project, category=category, priority=priority)
    if not any(columns.values()):
        st.info("No tasks found. Generate a blueprint to get a starter task list.")
        return
    for col, (status, items) in zip(st.columns(3), columns.items()):
        with col:
            st.markdown(f"### {status} ({len(items)})")
            for t in items:
                with st.container(border=True):
                    st.markdown(f"**{t.title}**  \n{t.description}")
                    st.caption(f"{t.project} · {t.category} · {t.priority}")
                    new_status = st.selectbox("Status", TASK_STATUSES, index=TASK_STATUSES.index(t.status),
                                              key=f"status-{t.id}", label_visibility="collapsed")
                    if new_status != t.status:
                        try:
                            repo.update_task_status(t.id, new_status, owner)
                            st.toast(f"Task updated to {new_status}")
                        except StoreError as e:
                            st.error(f"Failed to update task on server: {e.message}")
                        st.rerun()
                    if st.button("Delete", key=f"deltask-{t.id}"):
                        try:
                            repo.delete_task(t.id, owner)
                            st.toast("Task deleted successfully")
                        except StoreError as e:
                            st.error(f"Failed to delete task on server: {e.message}")
                        st.rerun()

# ---------- UI ----------
st.set_page_config(page_title="IdeaPrint", page_icon="✨", layout="wide")

with st.sidebar:
    st.header("IdeaPrint")
    owner = st.text_input("User ID", help="Leave blank to work in demo mode (this tab only).").strip() or None
    pages = ["Generate", "Dashboard", "Project", "Task Board"]
    page = st.radio("Go to", pages, index=pages.index(st.session_state.get("page", "Generate")))
    st.session_state["page"] = page

repo = get_repository()
{"Generate": page_generate, "Dashboard": page_dashboard,
 "Project": page_project, "Task Board": page_tasks}[page](repo, owner)
