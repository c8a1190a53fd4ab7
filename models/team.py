# models/team.py

from typing import Optional
from pydantic import Field, field_validator

from models.base import CamelModel
from models.enums import MemberStatus, Role


class TeamMember(CamelModel):
    id: str
    name: str
    role: Role
    email: str
    monthly_cost: float = 0      # salary or retainer
    status: MemberStatus = MemberStatus.pending
    joined_date: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


def _validate_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if "@" not in v:
        raise ValueError("email must contain '@'")
    return v


class TeamMemberInvite(CamelModel):
    """Invited members start as pending until they accept."""
    email: str = Field(..., min_length=3)
    role: Role
    name: Optional[str] = ""
    monthly_cost: float = Field(0, ge=0)

    @field_validator("email")
    def check_email(cls, v):
        return _validate_email(v)


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    monthly_cost: Optional[float] = Field(None, ge=0)

    @field_validator("email")
    def check_email(cls, v):
        return _validate_email(v)


class MemberStatusUpdate(CamelModel):
    status: MemberStatus

    @field_validator("status")
    def no_pending(cls, v):
        if v == MemberStatus.pending:
            raise ValueError("status must be 'active' or 'inactive'")
        return v
