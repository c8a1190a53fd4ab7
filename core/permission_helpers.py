from enum import Enum
from typing import Dict, Optional

from fastapi import Depends, HTTPException

from dependencies.auth import get_current_user, CurrentUser
from core.permissions import NO_PERMISSIONS
from core.store import get_store
from models.enums import Capability, Role
from models.permissions import RolePermissions
from models.project import Project
from models.stage import Stage


def _role_key(role) -> Optional[str]:
    if isinstance(role, Enum):
        return role.value
    return role if isinstance(role, str) else None


# -----------------------------------------------------
# Access evaluator
#   effective = is_admin OR table[role][capability]
#   unknown role / capability → False (fail-closed)
# -----------------------------------------------------
def evaluate_capability(
    is_admin: bool,
    role,
    capability,
    table: Optional[Dict[str, RolePermissions]] = None,
) -> bool:
    if is_admin:
        return True

    if table is None:
        table = get_store().get_role_permissions()

    entry = table.get(_role_key(role), NO_PERMISSIONS)
    return entry.grants(capability)


def effective_permissions(
    is_admin: bool,
    role,
    table: Optional[Dict[str, RolePermissions]] = None,
) -> RolePermissions:
    if table is None:
        table = get_store().get_role_permissions()

    return RolePermissions(**{
        capability.name: evaluate_capability(is_admin, role, capability, table)
        for capability in Capability
    })


# -----------------------------------------------------
# Current-user wrappers
# -----------------------------------------------------
def get_effective_permissions(user: CurrentUser) -> RolePermissions:
    return effective_permissions(user.is_admin, user.role)


def has_permission(user: CurrentUser, capability) -> bool:
    return evaluate_capability(user.is_admin, user.role, capability)


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(capability):
    """
    Usage:
        @router.post("/", dependencies=[Depends(requires_permission(Capability.can_edit))])
    """
    capability_name = _role_key(capability)

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        if not has_permission(current_user, capability_name):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{capability_name}' required"
            )
        return current_user

    return dependency


# ============================================================
# ADMIN (CORE ACCOUNT) HELPERS
# ============================================================

def is_admin(user: CurrentUser) -> bool:
    """Core-account mode bypasses every per-role restriction."""
    return bool(user.is_admin)


def require_admin(user: CurrentUser):
    """Raise exception if the session is not in core-account mode."""
    if not is_admin(user):
        raise HTTPException(
            status_code=403,
            detail="Core account access required"
        )


def admin_required(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    require_admin(current_user)
    return current_user


# ============================================================
# PROJECT VISIBILITY
# ============================================================

def can_view_project(user: CurrentUser, project: Project) -> bool:
    """Non-admins only see projects that have their role on the team."""
    if is_admin(user):
        return True
    return user.role in project.team


def require_project_access(user: CurrentUser, project: Project):
    if not can_view_project(user, project):
        raise HTTPException(
            status_code=403,
            detail=f"You do not have access to project {project.id}"
        )


# ============================================================
# STAGE ACCESS SCOPING
# ============================================================

# Roles that always see every stage of a project they belong to
PRIVILEGED_STAGE_ROLES = frozenset({
    Role.client.value,
    Role.principal_architect.value,
    Role.project_manager.value,
})


def can_access_stage(stage: Stage, role, user_name: Optional[str], is_admin: bool = False) -> bool:
    """
    True when any of these holds:
      • admin (core account)
      • user_name is a listed participant
      • a task in the stage is assigned to the role or to user_name
      • the role is one of PRIVILEGED_STAGE_ROLES
    """
    if is_admin:
        return True

    role = _role_key(role)

    if user_name and user_name in (stage.participants or []):
        return True

    for task in stage.tasks:
        if role is not None and _role_key(task.assigned_to) == role:
            return True
        if user_name and task.assignee_name == user_name:
            return True

    return role in PRIVILEGED_STAGE_ROLES


def stage_user_name(user: CurrentUser, project: Project) -> str:
    """
    The name a user goes by inside a project: whoever fills their role
    on the project team, else their own name.
    """
    return project.team.get(user.role) or user.name


def user_can_access_stage(user: CurrentUser, project: Project, stage: Stage) -> bool:
    return can_access_stage(stage, user.role, stage_user_name(user, project), is_admin(user))


def require_stage_access(user: CurrentUser, project: Project, stage: Stage):
    if not user_can_access_stage(user, project, stage):
        raise HTTPException(
            status_code=403,
            detail=f"You do not have access to stage '{stage.name}'"
        )
