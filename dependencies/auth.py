from typing import List
from fastapi import Depends, HTTPException, status
from pydantic import BaseModel

from core.config import settings
from core.errors import RecordNotFound
from core.session import get_session
from core.store import get_store
from models.enums import MemberStatus


# ============================================================
# Current User Model (who is operating the dashboard)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # team member id
    name: str
    email: str

    member_role: str                # the member's own role
    role: str                       # role currently in effect (may be simulated)

    is_core_account: bool = False   # raw admin toggle
    is_simulating: bool = False     # viewing as a role other than member_role
    is_admin: bool = False          # admin override after the simulation policy


def resolve_admin(is_core_account: bool, is_simulating: bool, policy: str = None) -> bool:
    """
    Apply ADMIN_SIMULATION_POLICY to the core-account toggle.

    coexist  → the toggle alone decides.
    suppress → previewing another role turns the override off.
    """
    policy = policy or settings.ADMIN_SIMULATION_POLICY
    if not is_core_account:
        return False
    if policy == "suppress" and is_simulating:
        return False
    return True


# ============================================================
# SESSION DECODING (session toggles + team member record)
# ============================================================
def get_current_user() -> CurrentUser:
    session = get_session()

    try:
        member = get_store().get_member(session.member_id)
    except RecordNotFound:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active studio session",
        )

    if member.status == MemberStatus.inactive:
        raise HTTPException(
            status_code=403,
            detail="Archived members have no access to the studio",
        )

    member_role = member.role.value
    role = session.simulated_role or member_role
    is_simulating = role != member_role

    return CurrentUser(
        id=member.id,
        name=member.name,
        email=member.email,
        member_role=member_role,
        role=role,
        is_core_account=session.is_core_account,
        is_simulating=is_simulating,
        is_admin=resolve_admin(session.is_core_account, is_simulating),
    )


# ============================================================
# ROLE CHECKER (basic role list guard, admins pass)
# ============================================================
def requires_role(allowed_roles: List[str]):
    def checker(current_user: CurrentUser = Depends(get_current_user)):
        if current_user.is_admin:
            return current_user
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Requires one of: {allowed_roles}",
            )
        return current_user
    return checker

