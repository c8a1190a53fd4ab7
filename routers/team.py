# routers/team.py

from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from dependencies.auth import get_current_user, CurrentUser
from core.config import settings
from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import is_admin, requires_permission
from core.project_helpers import visible_projects
from core.store import get_store
from core.team_helpers import (
    build_invited_member,
    client_overview,
    seat_usage,
    staff_overview,
)
from core.visibility import redact_member
from models.enums import Capability, MemberStatus
from models.team import MemberStatusUpdate, TeamMember, TeamMemberInvite, TeamMemberUpdate


router = APIRouter(
    prefix="/team",
    tags=["Team"],
)


def _load_member(member_id: str) -> TeamMember:
    try:
        return get_store().get_member(member_id)
    except Exception as e:
        raise handle_store_error(e, "Team member lookup failed")


def _save_member(member: TeamMember) -> TeamMember:
    try:
        return get_store().replace_member(member)
    except Exception as e:
        raise handle_store_error(e, "Failed to update team member")


def _ensure_free_seat():
    seats = seat_usage(get_store().list_members())
    if seats["usedSeats"] >= settings.TOTAL_SEATS:
        raise HTTPException(409, f"All {settings.TOTAL_SEATS} seats are in use")


# ============================================================
# STAFF / CLIENTS / SEATS
# ============================================================
@router.get("/staff", summary="Studio staff with project assignments")
def list_staff(
    q: Optional[str] = None,
    role: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    store = get_store()
    overview = staff_overview(
        store.list_members(),
        store.list_projects(),
        show_costs=is_admin(current_user),
        q=q,
        role=role,
    )
    return {"success": True, **overview}


@router.get("/clients", summary="Clients aggregated across projects")
def list_clients(q: Optional[str] = None, current_user: CurrentUser = Depends(get_current_user)):
    projects = visible_projects(current_user, get_store().list_projects())
    return {
        "success": True,
        "data": client_overview(projects, show_money=is_admin(current_user), q=q),
    }


@router.get("/seats", summary="Seat usage and monthly seat cost")
def get_seats(current_user: CurrentUser = Depends(get_current_user)):
    return seat_usage(get_store().list_members())


# ============================================================
# INVITE / ACCEPT / STATUS
# ============================================================
@router.post(
    "/invite",
    status_code=201,
    summary="Invite a new team member",
    dependencies=[Depends(requires_permission(Capability.can_manage_team))],
)
def invite_member(payload: TeamMemberInvite, current_user: CurrentUser = Depends(get_current_user)):
    store = get_store()
    _ensure_free_seat()

    member = build_invited_member(payload)
    try:
        store.add_member(member)
    except Exception as e:
        raise handle_store_error(e, "Failed to invite member")

    logger.info(f"{current_user.name} invited {member.email} as {member.role.value}")
    return member.to_wire()


@router.post("/{member_id}/accept", summary="Accept a pending invitation")
def accept_invitation(member_id: str, current_user: CurrentUser = Depends(get_current_user)):
    member = _load_member(member_id)

    if current_user.id != member.id and not is_admin(current_user):
        raise HTTPException(403, "Only the invited member can accept this invitation")
    if member.status != MemberStatus.pending:
        raise HTTPException(409, f"Member '{member_id}' has no pending invitation")

    member.status = MemberStatus.active
    _save_member(member)
    logger.info(f"{member.email} accepted their invitation")
    return member.to_wire()


@router.put(
    "/{member_id}/status",
    summary="Activate or archive a team member",
    dependencies=[Depends(requires_permission(Capability.can_manage_team))],
)
def change_member_status(
    member_id: str,
    payload: MemberStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    member = _load_member(member_id)

    # Reactivating an archived member takes a seat again
    if member.status == MemberStatus.inactive and payload.status == MemberStatus.active:
        _ensure_free_seat()

    member.status = payload.status
    _save_member(member)

    logger.info(f"{current_user.name} set {member.email} to {payload.status.value}")
    return member.to_wire()


# ============================================================
# PROFILE
# ============================================================
@router.put("/{member_id}", summary="Update a team member profile")
def update_member(
    member_id: str,
    payload: TeamMemberUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Members edit their own profile; core accounts may edit anyone.
    Cost changes are admin only.
    """
    if current_user.id != member_id and not is_admin(current_user):
        raise HTTPException(403, "You can only edit your own profile")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "monthly_cost" in changes and not is_admin(current_user):
        raise HTTPException(403, "Only core accounts can change member costs")

    member = _load_member(member_id)
    member = TeamMember.model_validate({**member.model_dump(), **changes})
    _save_member(member)

    return redact_member(member.to_wire(), is_admin(current_user))
