from models.enums import Capability, Role
from models.permissions import RolePermissions


def _perms(edit, upload, financials, team) -> RolePermissions:
    return RolePermissions(
        can_edit=edit,
        can_upload=upload,
        can_view_financials=financials,
        can_manage_team=team,
    )


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
ROLE_PERMISSIONS = {

    # =====================================================
    # FULL ACCESS
    # =====================================================
    Role.principal_architect.value:     _perms(True, True, True, True),
    Role.project_manager.value:         _perms(True, True, True, True),
    Role.account_manager.value:         _perms(True, True, True, False),

    # =====================================================
    # EXECUTION TEAM: edit/upload, no financials
    # =====================================================
    Role.senior_architect.value:        _perms(True, True, False, False),
    Role.junior_architect.value:        _perms(True, True, False, False),
    Role.main_engineer.value:           _perms(True, True, False, False),
    Role.structural_engineer.value:     _perms(True, True, False, False),
    Role.site_engineer.value:           _perms(True, True, False, False),
    Role.construction_manager.value:    _perms(True, True, False, True),
    Role.construction_supervisor.value: _perms(True, True, False, False),
    Role.site_documentation.value:      _perms(True, True, False, False),
    Role.photographer.value:            _perms(False, True, False, False),
    Role.award_submission.value:        _perms(False, True, False, False),
    Role.head_carpenter.value:          _perms(False, False, False, False),

    # =====================================================
    # BUSINESS / EXTERNAL: view only or limited
    # =====================================================
    Role.client.value:                  _perms(False, False, False, False),
    Role.developer.value:               _perms(False, False, True, False),
    Role.marketing.value:               _perms(False, True, False, False),
    Role.business_analyst.value:        _perms(False, False, True, False),
}

# Fallback for roles the table does not know
NO_PERMISSIONS = _perms(False, False, False, False)


def validate_permission_table(table: dict) -> None:
    """
    Every role needs exactly one entry and every entry all four flags.
    Raises at import time so a new role can never silently fall open.
    """
    roles = set(Role.list())
    missing = roles - set(table)
    unknown = set(table) - roles
    if missing or unknown:
        raise RuntimeError(
            f"Role permission table mismatch (missing={sorted(missing)}, unknown={sorted(unknown)})"
        )

    for role, entry in table.items():
        if not isinstance(entry, RolePermissions):
            raise RuntimeError(f"Permission entry for '{role}' is not a RolePermissions")
        for capability in Capability:
            if not isinstance(getattr(entry, capability.name, None), bool):
                raise RuntimeError(f"'{role}' has no boolean for {capability.value}")


validate_permission_table(ROLE_PERMISSIONS)
