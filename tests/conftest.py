# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from core.session import reset_session
from core.store import reset_store
from dependencies.auth import CurrentUser


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def as_role(client):
    """
    Switch the session to a role.

        as_role("Site Engineer")              # plain role, no admin override
        as_role("Principal Architect", True)  # core account on
    """
    def _switch(role: str, core_account: bool = False):
        client.put("/session/core-account", json={"enabled": core_account})
        response = client.put("/session/role", json={"role": role})
        assert response.status_code == 200, response.text
        return response.json()
    return _switch


@pytest.fixture
def mock_admin_user():
    """Core-account session for helper-level tests."""
    return CurrentUser(
        id="m1",
        name="Sadia Rahman",
        email="sadia@blueprint.os",
        member_role="Principal Architect",
        role="Principal Architect",
        is_core_account=True,
        is_admin=True,
    )


@pytest.fixture
def mock_site_engineer():
    return CurrentUser(
        id="m3",
        name="Marcus Johnson",
        email="marcus@blueprint.os",
        member_role="Site Engineer",
        role="Site Engineer",
    )


@pytest.fixture(autouse=True)
def reset_state():
    """Reload seed data and reset the session before each test."""
    reset_store()
    reset_session()
    yield
    reset_store()
    reset_session()
