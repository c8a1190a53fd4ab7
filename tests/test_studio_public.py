# tests/test_studio_public.py

"""
Tests for the studio profile, studio metrics, public portfolio and health checks.
"""

from fastapi.testclient import TestClient

from core.config import settings
from core.storage_helpers import format_bytes, studio_storage_breakdown, used_storage_bytes
from core.store import get_store
from models.enums import AssetType, Role
from models.stage import Asset, Comment


def test_get_profile(client: TestClient):
    data = client.get("/studio/profile").json()
    assert data["name"] == "Blueprint Architects Studio"
    assert data["foundedYear"] == 2015


def test_update_profile_admin(client: TestClient):
    response = client.put("/studio/profile", json={"tagline": "Built to last"})
    assert response.status_code == 200
    assert response.json()["tagline"] == "Built to last"
    assert client.get("/studio/profile").json()["name"] == "Blueprint Architects Studio"


def test_update_profile_ignores_nulls(client: TestClient):
    response = client.put("/studio/profile", json={"name": None, "foundedYear": None, "website": "https://blueprint.os"})
    assert response.status_code == 200
    data = client.get("/studio/profile").json()
    assert data["name"] == "Blueprint Architects Studio"
    assert data["foundedYear"] == 2015
    assert data["website"] == "https://blueprint.os"


def test_update_profile_forbidden(client: TestClient, as_role):
    as_role("Principal Architect")
    assert client.put("/studio/profile", json={"tagline": "Nope"}).status_code == 403


def test_metrics(client: TestClient):
    data = client.get("/studio/metrics").json()
    # m10 (Senior Architect) is archived
    assert data["architects"] == 2
    assert data["completedProjects"] == 1
    assert data["totalSquareFootage"] == 4500 + 12000 + 1800 + 45000 + 85000
    assert set(data["storage"]["byType"]) == {"cad", "3d", "image", "other"}
    assert 0 <= data["storage"]["percentUsed"] <= 100


def test_storage_breakdown_caps_percent():
    projects = get_store().list_projects()
    breakdown = studio_storage_breakdown(projects, limit=1)
    assert breakdown["percentUsed"] == 100
    assert breakdown["limitBytes"] == 1


def test_storage_default_limit():
    breakdown = studio_storage_breakdown([])
    assert breakdown["limitBytes"] == settings.STORAGE_LIMIT_BYTES == 500 * 1024 ** 3
    assert breakdown["usedBytes"] == 0


def test_used_storage_counts_documents_and_attachments():
    project = get_store().get_project("1")
    stage_bytes = sum(a.size or 0 for s in project.stages for a in s.assets)
    document_bytes = sum(d.size or 0 for d in project.documents)
    assert document_bytes > 0
    assert used_storage_bytes([project]) == stage_bytes + document_bytes

    sketch = Asset(id="att1", title="markup.png", type=AssetType.image, uploaded_by="Jamal Ahmed",
                   upload_date="2024-03-01", size=500)
    project.stages[0].discussions.append(
        Comment(id="c1", author="Jamal Ahmed", role=Role.client, text="See markup", timestamp=0, attachments=[sketch])
    )
    assert used_storage_bytes([project]) == stage_bytes + document_bytes + 500


def test_documents_use_up_quota(client: TestClient, monkeypatch):
    projects = get_store().list_projects()
    stage_only = sum(a.size or 0 for p in projects for s in p.stages for a in s.assets)
    monkeypatch.setattr(settings, "STORAGE_LIMIT_BYTES", stage_only + 10)

    response = client.post("/projects/1/documents", json={"title": "Brief.pdf", "size": 5})
    assert response.status_code == 507


def test_format_bytes():
    assert format_bytes(0) == "0 B"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(500 * 1024 ** 3) == "500 GB"


# ============================================================
# Public portfolio (no session needed)
# ============================================================
def test_public_project_has_no_private_fields(client: TestClient):
    data = client.get("/public/projects/1").json()
    assert data["name"] == "Meghna Riverside Residence"
    assert data["currentStageName"] == "Construction: Structure"
    for key in ("budget", "financials", "team", "documents", "history"):
        assert key not in data


def test_public_project_unknown(client: TestClient):
    assert client.get("/public/projects/missing").status_code == 404


def test_public_listing(client: TestClient):
    data = client.get("/public/projects").json()["data"]
    assert len(data) == 5


# ============================================================
# Health
# ============================================================
def test_health_app(client: TestClient):
    data = client.get("/health/app").json()
    assert data == {"service": settings.PROJECT_NAME, "status": "ok"}


def test_health_store(client: TestClient):
    data = client.get("/health/store").json()
    assert data["status"] == "ok"
    assert data["details"]["projects"] == 5
    assert data["details"]["roles"] == 18
