# models/permissions.py

from pydantic import BaseModel, ConfigDict

from models.base import CamelModel
from models.enums import Capability, Role


class RolePermissions(CamelModel):
    """
    Four independent capability flags for one role.
    Frozen so table entries can only be replaced, never edited in place.
    """

    model_config = ConfigDict(frozen=True)

    can_edit: bool = False
    can_upload: bool = False
    can_view_financials: bool = False
    can_manage_team: bool = False

    def grants(self, capability) -> bool:
        try:
            capability = Capability(str(capability))
        except ValueError:
            return False
        return bool(getattr(self, capability.name))

    def with_flag(self, capability: Capability, value: bool) -> "RolePermissions":
        return self.model_copy(update={capability.name: value})


class CapabilityToggle(BaseModel):
    role: Role
    capability: Capability
