# routers/permissions.py

from fastapi import APIRouter, Depends, Query

from dependencies.auth import get_current_user, CurrentUser
from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import (
    evaluate_capability,
    get_effective_permissions,
    requires_permission,
)
from core.store import get_store
from models.enums import Capability
from models.permissions import CapabilityToggle


router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


@router.get("", summary="Role permission matrix")
def get_matrix(current_user: CurrentUser = Depends(get_current_user)):
    table = get_store().get_role_permissions()
    return {
        "capabilities": Capability.list(),
        "roles": {role: perms.to_wire() for role, perms in table.items()},
    }


@router.put(
    "/toggle",
    summary="Flip one capability for one role",
    dependencies=[Depends(requires_permission(Capability.can_manage_team))],
)
def toggle_permission(payload: CapabilityToggle, current_user: CurrentUser = Depends(get_current_user)):
    try:
        updated = get_store().toggle_role_permission(payload.role.value, payload.capability)
    except Exception as e:
        raise handle_store_error(e, "Failed to update permissions")

    logger.info(
        f"{current_user.name} set {payload.capability.value}="
        f"{updated.grants(payload.capability)} for role '{payload.role.value}'"
    )
    return {"role": payload.role.value, "permissions": updated.to_wire()}


@router.get("/effective", summary="Capabilities of the current session")
def effective(current_user: CurrentUser = Depends(get_current_user)):
    return {
        "role": current_user.role,
        "isAdmin": current_user.is_admin,
        "permissions": get_effective_permissions(current_user).to_wire(),
    }


@router.get("/evaluate", summary="Evaluate a capability for any role")
def evaluate(
    role: str,
    capability: str,
    is_admin: bool = Query(False, alias="isAdmin"),
):
    """
    Pure evaluator: `isAdmin OR table[role][capability]`.
    Unknown roles and capabilities evaluate to false.
    """
    return {
        "role": role,
        "capability": capability,
        "isAdmin": is_admin,
        "granted": evaluate_capability(is_admin, role, capability),
    }
