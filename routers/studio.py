# routers/studio.py

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user, CurrentUser
from core.errors import handle_store_error
from core.logging_config import logger
from core.permission_helpers import admin_required
from core.project_helpers import is_project_completed
from core.storage_helpers import format_bytes, studio_storage_breakdown
from core.store import get_store
from core.team_helpers import ARCHITECT_ROLES
from models.enums import MemberStatus
from models.studio import StudioProfile, StudioProfileUpdate


router = APIRouter(
    prefix="/studio",
    tags=["Studio"],
)


@router.get("/profile", summary="Studio profile")
def get_profile():
    try:
        return get_store().get_profile().to_wire()
    except Exception as e:
        raise handle_store_error(e, "Failed to load studio profile")


@router.put("/profile", summary="Update studio profile (core account)")
def update_profile(payload: StudioProfileUpdate, current_user: CurrentUser = Depends(admin_required)):
    store = get_store()
    try:
        profile = store.get_profile()
    except Exception as e:
        raise handle_store_error(e, "Failed to load studio profile")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    profile = StudioProfile.model_validate({**profile.model_dump(), **changes})
    store.replace_profile(profile)
    logger.info(f"{current_user.name} updated the studio profile")
    return profile.to_wire()


@router.get("/metrics", summary="Studio-wide metrics")
def get_metrics(current_user: CurrentUser = Depends(get_current_user)):
    """
    Headline numbers for the studio page. Counts cover the whole studio,
    not just the projects visible to the current session.
    """
    store = get_store()
    projects = store.list_projects()
    members = store.list_members()

    architects = [
        m for m in members
        if m.role in ARCHITECT_ROLES and m.status != MemberStatus.inactive
    ]
    storage = studio_storage_breakdown(projects)

    return {
        "architects": len(architects),
        "totalProjects": len(projects),
        "completedProjects": sum(1 for p in projects if is_project_completed(p)),
        "totalSquareFootage": sum(p.square_footage or 0 for p in projects),
        "storage": {
            **storage,
            "usedLabel": format_bytes(storage["usedBytes"]),
            "limitLabel": format_bytes(storage["limitBytes"]),
        },
    }
