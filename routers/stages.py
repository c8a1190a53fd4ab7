# routers/stages.py

from fastapi import APIRouter, HTTPException, Depends, Query

from dependencies.auth import get_current_user, CurrentUser
from core.billing_helpers import record_stage_expense, remove_stage_expense
from core.errors import handle_store_error
from core.permission_helpers import (
    admin_required,
    require_stage_access,
    requires_permission,
    stage_user_name,
)
from core.project_helpers import (
    load_project,
    load_stage,
    save_project,
    serialize_stage,
    set_current_stage,
)
from core.storage_helpers import build_asset, ensure_storage_quota
from core.store import get_store
from core.task_helpers import (
    create_task,
    delete_task,
    serialize_task,
    toggle_task,
    update_task,
    validate_dependencies,
)
from core.utils import new_id, now_ms, today_iso
from models.enums import Capability, Role, StageStatus
from models.stage import AssetCreate, Comment, CommentCreate, ExpenseCreate, Stage, StageMetaUpdate, TaskWrite


router = APIRouter(
    prefix="/projects/{project_id}/stages",
    tags=["Stages"]
)

"""
STAGES ROUTER

Rules:
- Stage content (tasks, assets, discussions) needs stage access
- Task, stage and expense edits need canEdit; file registration needs canUpload
- Adding/removing stages and participants is admin only
"""


# ============================================================
# LIST / GET STAGES
# ============================================================
@router.get("", summary="List project stages with access flags")
def list_stages(project_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    return {
        "success": True,
        "currentStageId": project.current_stage_id,
        "data": [serialize_stage(project, s, current_user) for s in project.stages],
    }


@router.get("/{stage_id}", summary="Get one stage")
def get_stage(project_id: str, stage_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)
    return serialize_stage(project, stage, current_user)


# ============================================================
# ADD / DELETE STAGE (admin only)
# ============================================================
@router.post("", status_code=201, summary="Append a new stage")
def add_stage(project_id: str, current_user: CurrentUser = Depends(admin_required)):
    project = load_project(project_id, current_user)

    stage = Stage(
        id=new_id("stage-new"),
        name="New Phase",
        status=StageStatus.pending,
        description="Newly added project phase.",
        start_date=today_iso(),
    )
    project.stages = [*project.stages, stage]
    save_project(project, current_user, "Added stage", stage.name)
    return serialize_stage(project, stage, current_user)


@router.delete("/{stage_id}", summary="Delete a stage")
def delete_stage(
    project_id: str,
    stage_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    current_user: CurrentUser = Depends(admin_required),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)

    if not confirm:
        raise HTTPException(400, "Stage deletion must be confirmed with confirm=true")
    if len(project.stages) == 1:
        raise HTTPException(400, "A project needs at least one stage")

    project.stages = [s for s in project.stages if s.id != stage_id]
    if project.current_stage_id == stage_id:
        project.current_stage_id = project.stages[0].id

    save_project(project, current_user, "Deleted stage", stage.name)
    return {"success": True, "deleted": stage_id, "currentStageId": project.current_stage_id}


# ============================================================
# STAGE META + CURRENT STAGE
# ============================================================
@router.patch(
    "/{stage_id}",
    summary="Update stage status or start date",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def update_stage_meta(
    project_id: str,
    stage_id: str,
    payload: StageMetaUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    if payload.status is not None:
        stage.status = payload.status
    if payload.start_date is not None:
        stage.start_date = payload.start_date

    save_project(project, current_user, "Updated stage", stage.name)
    return serialize_stage(project, stage, current_user)


@router.post(
    "/{stage_id}/activate",
    summary="Make this the current stage",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def activate_stage(project_id: str, stage_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)

    set_current_stage(project, stage_id)
    save_project(project, current_user, "Moved to stage", stage.name)
    return {"success": True, "currentStageId": project.current_stage_id}


# ============================================================
# PARTICIPANTS (admin only)
# ============================================================
@router.put("/{stage_id}/participants/{name}", summary="Grant a person access to a stage")
def add_participant(
    project_id: str,
    stage_id: str,
    name: str,
    current_user: CurrentUser = Depends(admin_required),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)

    if name not in stage.participants:
        stage.participants = [*stage.participants, name]
        save_project(project, current_user, f"Granted stage access to {name}", stage.name)

    return {"success": True, "participants": stage.participants}


@router.delete("/{stage_id}/participants/{name}", summary="Revoke a person's stage access")
def remove_participant(
    project_id: str,
    stage_id: str,
    name: str,
    current_user: CurrentUser = Depends(admin_required),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)

    if name in stage.participants:
        stage.participants = [p for p in stage.participants if p != name]
        save_project(project, current_user, f"Revoked stage access for {name}", stage.name)

    return {"success": True, "participants": stage.participants}


# ============================================================
# TASKS
# ============================================================
@router.post(
    "/{stage_id}/tasks",
    status_code=201,
    summary="Create a task",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def add_task(project_id: str, stage_id: str, payload: TaskWrite, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)
    validate_dependencies(project, stage_id, payload.dependencies)

    task = create_task(stage, payload)
    save_project(project, current_user, "Added task", task.title)
    return serialize_task(project, task)


@router.put(
    "/{stage_id}/tasks/{task_id}",
    summary="Edit a task",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def edit_task(
    project_id: str,
    stage_id: str,
    task_id: str,
    payload: TaskWrite,
    current_user: CurrentUser = Depends(get_current_user),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)
    validate_dependencies(project, stage_id, payload.dependencies, task_id=task_id)

    task = update_task(stage, task_id, payload)
    save_project(project, current_user, "Edited task", task.title)
    return serialize_task(project, task)


@router.delete(
    "/{stage_id}/tasks/{task_id}",
    summary="Delete a task",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def remove_task(project_id: str, stage_id: str, task_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    task = delete_task(stage, task_id)
    save_project(project, current_user, "Deleted task", task.title)
    return {"success": True, "deleted": task_id}


@router.post(
    "/{stage_id}/tasks/{task_id}/toggle",
    summary="Toggle a task between pending and completed",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def toggle_task_status(project_id: str, stage_id: str, task_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    task = toggle_task(project, stage, task_id)
    save_project(project, current_user, f"Marked task {task.status.value}", task.title)
    return {
        "task": serialize_task(project, task),
        "stageStatus": stage.status.value,
    }


# ============================================================
# ASSETS
# ============================================================
@router.post(
    "/{stage_id}/assets",
    status_code=201,
    summary="Register a stage file",
    dependencies=[Depends(requires_permission(Capability.can_upload))],
)
def add_asset(project_id: str, stage_id: str, payload: AssetCreate, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    try:
        ensure_storage_quota(get_store().list_projects(), payload.size)
    except Exception as e:
        raise handle_store_error(e, "Upload rejected")

    uploader = project.team.get(current_user.role) or current_user.name
    asset = build_asset(payload, uploaded_by=uploader)
    stage.assets = [*stage.assets, asset]
    save_project(project, current_user, "Uploaded file", asset.title)
    return asset.to_wire()


@router.delete(
    "/{stage_id}/assets/{asset_id}",
    summary="Delete a stage file",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def remove_asset(project_id: str, stage_id: str, asset_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    asset = next((a for a in stage.assets if a.id == asset_id), None)
    if asset is None:
        raise HTTPException(404, f"File '{asset_id}' not found in stage '{stage_id}'")

    stage.assets = [a for a in stage.assets if a.id != asset_id]
    save_project(project, current_user, "Deleted file", asset.title)
    return {"success": True, "deleted": asset_id}


# ============================================================
# EXPENSES (stage costs)
# ============================================================
@router.post(
    "/{stage_id}/expenses",
    status_code=201,
    summary="Book a cost against a stage",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def add_expense(project_id: str, stage_id: str, payload: ExpenseCreate, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    expense = record_stage_expense(project, stage, payload)
    save_project(project, current_user, "Booked expense", expense.description)
    return expense.to_wire()


@router.delete(
    "/{stage_id}/expenses/{expense_id}",
    summary="Remove a stage cost",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def remove_expense(project_id: str, stage_id: str, expense_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    expense = remove_stage_expense(project, stage, expense_id)
    save_project(project, current_user, "Removed expense", expense.description)
    return {"success": True, "deleted": expense_id}


# ============================================================
# DISCUSSIONS
# ============================================================
@router.post("/{stage_id}/discussions", status_code=201, summary="Post to the stage discussion")
def post_comment(
    project_id: str,
    stage_id: str,
    payload: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    project = load_project(project_id, current_user)
    stage = load_stage(project, stage_id)
    require_stage_access(current_user, project, stage)

    author = stage_user_name(current_user, project)
    attachments = [build_asset(a, uploaded_by=author) for a in payload.attachments]
    if attachments:
        try:
            ensure_storage_quota(get_store().list_projects(), sum(a.size for a in payload.attachments))
        except Exception as e:
            raise handle_store_error(e, "Upload rejected")

    comment = Comment(
        id=new_id("c"),
        author=author,
        role=Role(current_user.role),
        text=payload.text,
        timestamp=now_ms(),
        attachments=attachments,
    )
    stage.discussions = [*stage.discussions, comment]
    save_project(project, current_user, "Commented on stage", stage.name)
    return comment.to_wire()
