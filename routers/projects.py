# routers/projects.py

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from dependencies.auth import get_current_user, CurrentUser
from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import (
    admin_required,
    requires_permission,
    user_can_access_stage,
)
from core.project_helpers import (
    build_new_project,
    filter_projects,
    load_project,
    merge_project_update,
    save_project,
    serialize_project,
    visible_projects,
)
from core.storage_helpers import (
    build_asset,
    ensure_storage_quota,
    format_bytes,
)
from core.store import get_store
from models.enums import Capability, Role, VerificationStatus
from models.project import (
    DEFAULT_CLASSIFICATIONS,
    DEFAULT_PROJECT_TYPES,
    ProjectCreate,
    ProjectUpdate,
    TeamAssignment,
)
from models.stage import AssetCreate


router = APIRouter(
    prefix="/projects",
    tags=["Projects"]
)


# ============================================================
# LIST PROJECTS
# ============================================================
@router.get(
    "",
    summary="List Projects",
    description="""
    Projects visible to the current session.

    **Filtering:** Non-admin users only see projects whose team includes their role.
    **Financials:** `budget` and `financials` are `"HIDDEN"` without `canViewFinancials`.

    **Query Parameters:**
    - `q`: Case-insensitive match on name, location or client name
    - `type`: Project type (`All` = no filter)
    - `classification`: Project classification (`All` = no filter)
    """,
)
def list_projects(
    q: Optional[str] = None,
    type: Optional[str] = None,
    classification: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    projects = visible_projects(current_user, get_store().list_projects())
    projects = filter_projects(projects, q=q, project_type=type, classification=classification)

    return {
        "success": True,
        "data": [serialize_project(p, current_user) for p in projects],
    }


@router.get("/options", summary="Project type and classification choices")
def project_options():
    return {
        "types": DEFAULT_PROJECT_TYPES,
        "classifications": DEFAULT_CLASSIFICATIONS,
    }


# ============================================================
# GET PROJECT
# ============================================================
@router.get("/{project_id}", summary="Get Project")
def get_project(project_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    return serialize_project(project, current_user, include_stages=True)


# ============================================================
# CREATE PROJECT
# ============================================================
@router.post(
    "",
    status_code=201,
    summary="Create Project",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def create_project(payload: ProjectCreate, current_user: CurrentUser = Depends(get_current_user)):
    store = get_store()
    project = build_new_project(payload, current_user, existing_count=len(store.list_projects()))

    try:
        store.add_project(project)
    except Exception as e:
        raise handle_store_error(e, "Failed to create project")

    project = save_project(project, current_user, "Created project", project.name)
    return serialize_project(project, current_user, include_stages=True)


# ============================================================
# UPDATE PROJECT
# ============================================================
@router.put(
    "/{project_id}",
    summary="Update Project",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def update_project(project_id: str, payload: ProjectUpdate, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    project = merge_project_update(project, payload)
    project = save_project(project, current_user, "Updated project details", project.name)
    return serialize_project(project, current_user, include_stages=True)


# ============================================================
# DELETE PROJECT (admin only)
# ============================================================
@router.delete("/{project_id}", summary="Delete Project")
def delete_project(project_id: str, current_user: CurrentUser = Depends(admin_required)):
    try:
        get_store().delete_project(project_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to delete project")

    logger.info(f"{current_user.name} deleted project {project_id}")
    return {"success": True, "deleted": project_id}


# ============================================================
# PROJECT TEAM
# ============================================================
@router.put(
    "/{project_id}/team/{role}",
    summary="Assign a person to a role on the project",
    dependencies=[Depends(requires_permission(Capability.can_manage_team))],
)
def assign_team_role(
    project_id: str,
    role: Role,
    payload: TeamAssignment,
    current_user: CurrentUser = Depends(get_current_user),
):
    project = load_project(project_id, current_user)
    project.team = {**project.team, role.value: payload.member_name}
    project = save_project(project, current_user, f"Assigned {payload.member_name} as {role.value}")
    return {"success": True, "team": project.team}


@router.delete(
    "/{project_id}/team/{role}",
    summary="Remove a role from the project team",
    dependencies=[Depends(requires_permission(Capability.can_manage_team))],
)
def remove_team_role(project_id: str, role: Role, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    if role.value not in project.team:
        raise HTTPException(404, f"No {role.value} on this project")

    project.team = {r: name for r, name in project.team.items() if r != role.value}
    project = save_project(project, current_user, f"Removed {role.value} from project team")
    return {"success": True, "team": project.team}


# ============================================================
# PROJECT DOCUMENTS (agreements, BOQ, safety plans)
# ============================================================
@router.get("/{project_id}/documents", summary="List project documents")
def list_documents(project_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    return {"success": True, "data": [d.to_wire() for d in project.documents]}


@router.post(
    "/{project_id}/documents",
    status_code=201,
    summary="Register a project document",
    dependencies=[Depends(requires_permission(Capability.can_upload))],
)
def add_document(project_id: str, payload: AssetCreate, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)

    try:
        ensure_storage_quota(get_store().list_projects(), payload.size)
    except Exception as e:
        raise handle_store_error(e, "Upload rejected")

    document = build_asset(payload, uploaded_by=current_user.name, prefix="doc")
    if document.verification_status is None:
        document.verification_status = VerificationStatus.none

    project.documents = [*project.documents, document]
    save_project(project, current_user, "Uploaded document", document.title)
    return document.to_wire()


@router.delete(
    "/{project_id}/documents/{document_id}",
    summary="Remove a project document",
    dependencies=[Depends(requires_permission(Capability.can_edit))],
)
def delete_document(project_id: str, document_id: str, current_user: CurrentUser = Depends(get_current_user)):
    project = load_project(project_id, current_user)
    document = next((d for d in project.documents if d.id == document_id), None)
    if document is None:
        raise HTTPException(404, f"Document '{document_id}' not found")

    project.documents = [d for d in project.documents if d.id != document_id]
    save_project(project, current_user, "Removed document", document.title)
    return {"success": True, "deleted": document_id}


# ============================================================
# FILE INDEX (assets of accessible stages)
# ============================================================
@router.get("/{project_id}/files", summary="Stage files grouped by stage")
def list_files(
    project_id: str,
    type: Optional[str] = Query(None, description="Asset type filter (`all` = no filter)"),
    q: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    project = load_project(project_id, current_user)
    needle = (q or "").lower()

    groups = []
    total_bytes = 0
    total_files = 0
    for stage in project.stages:
        if not user_can_access_stage(current_user, project, stage):
            continue

        assets = [
            a for a in stage.assets
            if (not type or type == "all" or a.type.value == type)
            and (not needle or needle in a.title.lower())
        ]
        if assets:
            groups.append({
                "stageId": stage.id,
                "stageName": stage.name,
                "stageStatus": stage.status.value,
                "assets": [a.to_wire() for a in assets],
            })
            total_bytes += sum(a.size or 0 for a in assets)
            total_files += len(assets)

    return {
        "success": True,
        "data": groups,
        "totalBytes": total_bytes,
        "totalFiles": total_files,
        "totalSize": format_bytes(total_bytes),
    }

