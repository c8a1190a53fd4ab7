# tests/test_permissions.py

"""
Tests for the role permission table, the capability evaluator
and the permissions endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from core.permission_helpers import effective_permissions, evaluate_capability
from core.permissions import NO_PERMISSIONS, ROLE_PERMISSIONS, validate_permission_table
from dependencies.auth import resolve_admin
from models.enums import Capability, Role
from models.permissions import RolePermissions


# (canEdit, canUpload, canViewFinancials, canManageTeam)
EXPECTED = {
    "Principal Architect":     (True, True, True, True),
    "Project Manager":         (True, True, True, True),
    "Account Manager":         (True, True, True, False),
    "Senior Architect":        (True, True, False, False),
    "Junior Architect":        (True, True, False, False),
    "Main Engineer":           (True, True, False, False),
    "Structural Engineer":     (True, True, False, False),
    "Site Engineer":           (True, True, False, False),
    "Construction Manager":    (True, True, False, True),
    "Construction Supervisor": (True, True, False, False),
    "Site Documentation":      (True, True, False, False),
    "Project Photographer":    (False, True, False, False),
    "Award Submission Team":   (False, True, False, False),
    "Head Carpenter":          (False, False, False, False),
    "Client":                  (False, False, False, False),
    "Developer":               (False, False, True, False),
    "Marketing Dept":          (False, True, False, False),
    "Business Analyst":        (False, False, True, False),
}

CAPABILITY_ORDER = [
    Capability.can_edit,
    Capability.can_upload,
    Capability.can_view_financials,
    Capability.can_manage_team,
]

ROLE_CAPABILITY_GRID = [
    (role, capability, EXPECTED[role.value][i])
    for role in Role
    for i, capability in enumerate(CAPABILITY_ORDER)
]


# ============================================================
# Evaluator
# ============================================================
@pytest.mark.parametrize("role,capability,expected", ROLE_CAPABILITY_GRID)
def test_non_admin_matches_table(role, capability, expected):
    assert evaluate_capability(False, role, capability, ROLE_PERMISSIONS) is expected


@pytest.mark.parametrize("role,capability,expected", ROLE_CAPABILITY_GRID)
def test_admin_overrides_every_flag(role, capability, expected):
    assert evaluate_capability(True, role, capability, ROLE_PERMISSIONS) is True


@pytest.mark.parametrize("capability", list(Capability))
def test_unknown_role_fails_closed(capability):
    assert evaluate_capability(False, "Wizard", capability, ROLE_PERMISSIONS) is False
    assert evaluate_capability(False, None, capability, ROLE_PERMISSIONS) is False


def test_unknown_capability_fails_closed():
    assert evaluate_capability(False, Role.principal_architect, "canFly", ROLE_PERMISSIONS) is False
    assert evaluate_capability(True, Role.principal_architect, "canFly", ROLE_PERMISSIONS) is True


def test_evaluator_is_idempotent():
    first = [evaluate_capability(False, r, c, ROLE_PERMISSIONS) for r, c, _ in ROLE_CAPABILITY_GRID]
    second = [evaluate_capability(False, r, c, ROLE_PERMISSIONS) for r, c, _ in ROLE_CAPABILITY_GRID]
    assert first == second


def test_string_and_enum_roles_agree():
    for role in Role:
        for capability in Capability:
            assert evaluate_capability(False, role, capability, ROLE_PERMISSIONS) == \
                evaluate_capability(False, role.value, capability.value, ROLE_PERMISSIONS)


def test_client_without_admin_has_nothing():
    perms = effective_permissions(False, Role.client, ROLE_PERMISSIONS)
    assert perms == NO_PERMISSIONS


def test_principal_architect_has_everything():
    perms = effective_permissions(False, Role.principal_architect, ROLE_PERMISSIONS)
    assert all(perms.grants(c) for c in Capability)


def test_missing_entry_is_fail_closed():
    table = {k: v for k, v in ROLE_PERMISSIONS.items() if k != Role.developer.value}
    assert evaluate_capability(False, Role.developer, Capability.can_view_financials, table) is False


# ============================================================
# Table completeness
# ============================================================
def test_table_has_exactly_one_entry_per_role():
    assert set(ROLE_PERMISSIONS) == set(Role.list())
    validate_permission_table(ROLE_PERMISSIONS)


def test_validation_rejects_missing_role():
    table = dict(ROLE_PERMISSIONS)
    table.pop(Role.client.value)
    with pytest.raises(RuntimeError):
        validate_permission_table(table)


def test_validation_rejects_unknown_role():
    table = {**ROLE_PERMISSIONS, "Wizard": RolePermissions()}
    with pytest.raises(RuntimeError):
        validate_permission_table(table)


def test_validation_rejects_non_permission_entry():
    table = {**ROLE_PERMISSIONS, Role.client.value: {"canEdit": False}}
    with pytest.raises(RuntimeError):
        validate_permission_table(table)


# ============================================================
# Admin / simulation policy
# ============================================================
@pytest.mark.parametrize("core,simulating,policy,expected", [
    (True, False, "coexist", True),
    (True, True, "coexist", True),
    (True, False, "suppress", True),
    (True, True, "suppress", False),
    (False, False, "coexist", False),
    (False, True, "suppress", False),
])
def test_resolve_admin(core, simulating, policy, expected):
    assert resolve_admin(core, simulating, policy) is expected


# ============================================================
# Endpoints
# ============================================================
def test_matrix_lists_every_role(client: TestClient):
    response = client.get("/permissions")
    assert response.status_code == 200
    data = response.json()
    assert data["capabilities"] == ["canEdit", "canUpload", "canViewFinancials", "canManageTeam"]
    assert set(data["roles"]) == set(Role.list())
    assert data["roles"]["Developer"] == {
        "canEdit": False,
        "canUpload": False,
        "canViewFinancials": True,
        "canManageTeam": False,
    }


def test_effective_for_site_engineer(client: TestClient, as_role):
    as_role("Site Engineer")
    response = client.get("/permissions/effective")
    assert response.status_code == 200
    data = response.json()
    assert data["isAdmin"] is False
    assert data["permissions"] == {
        "canEdit": True,
        "canUpload": True,
        "canViewFinancials": False,
        "canManageTeam": False,
    }


def test_effective_for_admin(client: TestClient):
    data = client.get("/permissions/effective").json()
    assert data["isAdmin"] is True
    assert all(data["permissions"].values())


def test_evaluate_endpoint(client: TestClient):
    def granted(**params):
        response = client.get("/permissions/evaluate", params=params)
        assert response.status_code == 200
        return response.json()["granted"]

    assert granted(role="Client", capability="canEdit") is False
    assert granted(role="Client", capability="canEdit", isAdmin="true") is True
    assert granted(role="Business Analyst", capability="canViewFinancials") is True
    assert granted(role="Wizard", capability="canEdit") is False


def test_toggle_flips_flag(client: TestClient, as_role):
    response = client.put("/permissions/toggle", json={"role": "Client", "capability": "canEdit"})
    assert response.status_code == 200
    assert response.json()["permissions"]["canEdit"] is True

    as_role("Client")
    assert client.get("/permissions/effective").json()["permissions"]["canEdit"] is True


def test_toggle_twice_restores(client: TestClient):
    for _ in range(2):
        client.put("/permissions/toggle", json={"role": "Developer", "capability": "canViewFinancials"})
    roles = client.get("/permissions").json()["roles"]
    assert roles["Developer"]["canViewFinancials"] is True


def test_toggle_requires_manage_team(client: TestClient, as_role):
    as_role("Site Engineer")
    response = client.put("/permissions/toggle", json={"role": "Client", "capability": "canEdit"})
    assert response.status_code == 403


def test_toggle_rejects_unknown_role(client: TestClient):
    response = client.put("/permissions/toggle", json={"role": "Wizard", "capability": "canEdit"})
    assert response.status_code == 422
