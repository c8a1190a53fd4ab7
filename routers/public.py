# routers/public.py

from fastapi import APIRouter, HTTPException

from core.errors import RecordNotFound
from core.project_helpers import current_stage_name
from core.store import get_store
from models.project import Project


router = APIRouter(
    prefix="/public",
    tags=["Public"],
)


PUBLIC_FIELDS = (
    "id",
    "name",
    "location",
    "type",
    "classification",
    "squareFootage",
    "description",
    "thumbnailUrl",
    "gallery",
)


def public_project_view(project: Project) -> dict:
    """Portfolio fields only. No financials, team or documents."""
    data = project.to_wire()
    view = {key: data.get(key) for key in PUBLIC_FIELDS}
    view["currentStageName"] = current_stage_name(project)
    return view


# ============================================================
# GET - Portfolio (no auth)
# ============================================================
@router.get("/projects", summary="Public portfolio")
def list_public_projects():
    return {
        "success": True,
        "data": [public_project_view(p) for p in get_store().list_projects()],
    }


@router.get("/projects/{project_id}", summary="Public project page")
def get_public_project(project_id: str):
    try:
        project = get_store().get_project(project_id)
    except RecordNotFound:
        raise HTTPException(404, "Project not found")

    return public_project_view(project)
