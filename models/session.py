# models/session.py

from models.base import CamelModel
from models.enums import Role


class RoleSwitch(CamelModel):
    role: Role


class CoreAccountToggle(CamelModel):
    enabled: bool


class SessionUserSwitch(CamelModel):
    member_id: str
