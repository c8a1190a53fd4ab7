# routers/session.py

from fastapi import APIRouter, HTTPException, Depends

from dependencies.auth import get_current_user, CurrentUser
from core import session as studio_session
from core.errors import handle_store_error
from core.permission_helpers import get_effective_permissions
from core.store import get_store
from models.enums import MemberStatus, Role
from models.session import CoreAccountToggle, RoleSwitch, SessionUserSwitch


router = APIRouter(
    prefix="/session",
    tags=["Session"],
)


def _session_payload(user: CurrentUser) -> dict:
    return {
        "memberId": user.id,
        "name": user.name,
        "email": user.email,
        "memberRole": user.member_role,
        "role": user.role,
        "isCoreAccount": user.is_core_account,
        "isSimulating": user.is_simulating,
        "isAdmin": user.is_admin,
        "permissions": get_effective_permissions(user).to_wire(),
    }


@router.get("", summary="Current session and effective permissions")
def get_session(current_user: CurrentUser = Depends(get_current_user)):
    return _session_payload(current_user)


@router.get("/roles", summary="Roles available for preview")
def list_roles():
    return {"roles": Role.list()}


@router.put("/role", summary="View the dashboard as another role")
def switch_role(payload: RoleSwitch):
    """
    Switching to Client also leaves core-account mode, so the client
    portal renders exactly what a client would see.
    """
    studio_session.set_role(payload.role)
    return _session_payload(get_current_user())


@router.put("/core-account", summary="Toggle core account (admin) mode")
def toggle_core_account(payload: CoreAccountToggle):
    studio_session.set_core_account(payload.enabled)
    return _session_payload(get_current_user())


@router.put("/user", summary="Act as another team member")
def switch_user(payload: SessionUserSwitch):
    try:
        member = get_store().get_member(payload.member_id)
    except Exception as e:
        raise handle_store_error(e, "Cannot switch user")

    if member.status == MemberStatus.inactive:
        raise HTTPException(403, f"{member.name} is archived and cannot sign in")

    studio_session.set_member(payload.member_id)
    return _session_payload(get_current_user())
