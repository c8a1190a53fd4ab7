# core/project_helpers.py

from typing import Iterable, List, Optional

from fastapi import HTTPException

from dependencies.auth import CurrentUser
from core.errors import RecordNotFound, handle_store_error
from core.logging_config import logger
from core.notifications import run_deadline_check
from core.permission_helpers import (
    can_view_project,
    has_permission,
    require_project_access,
    user_can_access_stage,
)
from core.store import get_store
from core.stage_templates import HANDOVER_STAGE_KEY, generate_standard_stages
from core.task_helpers import serialize_task, stage_progress
from core.utils import new_id, now_ms
from core.visibility import redact_project, redact_stage
from models.enums import Capability, StageStatus
from models.financials import ProjectFinancials
from models.project import Project, ProjectActivity, ProjectCreate, ProjectUpdate
from models.stage import Stage


# -----------------------------------------------------
# Derived values
# -----------------------------------------------------
def project_progress(project: Project) -> int:
    """Percent of the lifecycle reached, counting the current stage as done."""
    index = project.stage_index(project.current_stage_id)
    total = len(project.stages) or 1
    return round((index + 1) / total * 100)


def current_stage_name(project: Project) -> str:
    stage = project.find_stage(project.current_stage_id)
    return stage.name if stage else "Unknown Stage"


def visible_projects(user: CurrentUser, projects: Iterable[Project]) -> List[Project]:
    return [p for p in projects if can_view_project(user, p)]


def filter_projects(
    projects: Iterable[Project],
    q: Optional[str] = None,
    project_type: Optional[str] = None,
    classification: Optional[str] = None,
) -> List[Project]:
    result = list(projects)

    if q:
        needle = q.lower()
        result = [
            p for p in result
            if needle in p.name.lower()
            or needle in p.location.lower()
            or needle in p.client_name.lower()
        ]

    if project_type and project_type != "All":
        result = [p for p in result if p.type == project_type]

    if classification and classification != "All":
        result = [p for p in result if p.classification == classification]

    return result


def aggregate_financials(projects: Iterable[Project]) -> dict:
    totals = {"totalRevenue": 0, "totalExpenses": 0, "totalCollected": 0, "pendingBills": 0}
    for p in projects:
        f = p.financials
        if f is None:
            continue
        totals["totalRevenue"] += f.total_invoiced or 0
        totals["totalExpenses"] += f.total_expenses or 0
        totals["totalCollected"] += f.total_collected or 0
        totals["pendingBills"] += f.pending_bills or 0
    return totals


# -----------------------------------------------------
# Serialization (with visibility applied)
# -----------------------------------------------------
def serialize_project(project: Project, user: CurrentUser, include_stages: bool = False) -> dict:
    data = project.to_wire()
    data["progressPercent"] = project_progress(project)
    data["currentStageName"] = current_stage_name(project)

    if include_stages:
        data["stages"] = [serialize_stage(project, s, user) for s in project.stages]
    else:
        data.pop("stages", None)
        data["stageCount"] = len(project.stages)

    return redact_project(data, has_permission(user, Capability.can_view_financials))


def serialize_stage(project: Project, stage: Stage, user: CurrentUser) -> dict:
    """
    Stage payload with an access flag. Content of stages the user
    cannot access is left out; expenses need canViewFinancials.
    """
    has_access = user_can_access_stage(user, project, stage)
    data = stage.to_wire()
    data["hasAccess"] = has_access
    data["progress"] = stage_progress(stage)

    if has_access:
        data["tasks"] = [serialize_task(project, t) for t in stage.tasks]
    else:
        for key in ("tasks", "assets", "discussions", "expenses"):
            data[key] = []

    return redact_stage(data, has_permission(user, Capability.can_view_financials))


# -----------------------------------------------------
# History
# -----------------------------------------------------
def record_activity(project: Project, user: CurrentUser, action: str, target: Optional[str] = None) -> Project:
    project.history = [
        *project.history,
        ProjectActivity(
            id=new_id("h"),
            user=user.name,
            action=action,
            target=target,
            timestamp=now_ms(),
        ),
    ]
    return project


# -----------------------------------------------------
# Create / update
# -----------------------------------------------------
def build_new_project(payload: ProjectCreate, user: CurrentUser, existing_count: int = 0) -> Project:
    stages = generate_standard_stages()

    return Project(
        id=new_id("p"),
        name=payload.name or "Untitled Project",
        description=payload.description or "",
        location=payload.location or "",
        google_map_link=payload.google_map_link,
        client_name=payload.client_name or "",
        client_point_of_contact=payload.client_point_of_contact or "",
        client_email=payload.client_email or "",
        type=payload.type or "Residential",
        classification=payload.classification or "Private",
        square_footage=payload.square_footage or 0,
        budget=payload.budget or 0,
        financials=payload.financials or ProjectFinancials(),
        current_stage_id=stages[0].id,
        stages=stages,
        documents=[],
        thumbnail_url=payload.thumbnail_url or f"https://picsum.photos/800/600?random={existing_count + 10}",
        gallery=payload.gallery or [],
        team={user.role: user.name},
        history=[],
    )


def merge_project_update(project: Project, payload: ProjectUpdate) -> Project:
    """
    Apply edited scalar fields. Stages, team, documents and financials
    always carry over from the stored project; null or blank optional
    text keeps the previous value.
    """
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    keep_if_blank = {"thumbnail_url", "client_point_of_contact", "client_email", "description"}
    for field in keep_if_blank:
        if field in changes and not changes[field]:
            changes.pop(field)

    # Re-validate the merged record so the stored project stays well-typed
    return Project.model_validate({**project.model_dump(), **changes})


def set_current_stage(project: Project, stage_id: str) -> Project:
    """
    Make `stage_id` the active stage: earlier stages completed,
    later stages pending.
    """
    index = project.stage_index(stage_id)
    stages = []
    for i, stage in enumerate(project.stages):
        if i < index:
            status = StageStatus.completed
        elif i == index:
            status = StageStatus.active
        else:
            status = StageStatus.pending
        stages.append(stage.model_copy(update={"status": status}))

    project.stages = stages
    project.current_stage_id = stage_id
    return project


def is_project_completed(project: Project) -> bool:
    """A project counts as complete once it reached its handover stage."""
    handover = next((i for i, s in enumerate(project.stages) if HANDOVER_STAGE_KEY in s.id), -1)
    if handover < 0:
        return False
    return project.stage_index(project.current_stage_id) >= handover


# -----------------------------------------------------
# Load / save through the store
# -----------------------------------------------------
def load_project(project_id: str, user: CurrentUser) -> Project:
    """Fetch a project copy, 404 if unknown and 403 if not visible."""
    try:
        project = get_store().get_project(project_id)
    except RecordNotFound as e:
        raise HTTPException(404, e.message)

    require_project_access(user, project)
    return project


def load_stage(project: Project, stage_id: str) -> Stage:
    stage = project.find_stage(stage_id)
    if stage is None:
        raise HTTPException(404, f"Stage '{stage_id}' not found")
    return stage


def save_project(project: Project, user: CurrentUser, action: str, target: Optional[str] = None) -> Project:
    """
    Record the change in the project history, replace the stored project
    and refresh deadline notifications.
    """
    record_activity(project, user, action, target)

    try:
        get_store().replace_project(project)
    except Exception as e:
        raise handle_store_error(e, f"Failed to {action.lower()}")

    logger.info(f"{user.name} ({user.role}): {action}{f' - {target}' if target else ''} [project {project.id}]")
    run_deadline_check()
    return project
