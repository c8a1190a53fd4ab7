# routers/dashboard.py

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user, CurrentUser
from core.billing_helpers import project_ledger
from core.errors import handle_store_error
from core.logging_config import logger
from core.notifications import run_deadline_check
from core.permission_helpers import has_permission, requires_permission
from core.project_helpers import aggregate_financials, is_project_completed, visible_projects
from core.store import get_store
from models.enums import Capability


router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


# ============================================================
# OVERVIEW + FINANCIALS + LEDGERS
# ============================================================
@router.get("", summary="Dashboard overview for the current session")
def overview(current_user: CurrentUser = Depends(get_current_user)):
    store = get_store()
    projects = visible_projects(current_user, store.list_projects())
    completed = sum(1 for p in projects if is_project_completed(p))

    return {
        "projectCount": len(projects),
        "activeProjects": len(projects) - completed,
        "completedProjects": completed,
        "unreadNotifications": sum(1 for n in store.list_notifications() if not n.read),
        "financials": _financials_or_none(current_user, projects),
    }


@router.get("/financials", summary="Aggregate financials over visible projects")
def financials(current_user: CurrentUser = Depends(get_current_user)):
    """
    Returns `{"financials": null}` for sessions without canViewFinancials.
    """
    projects = visible_projects(current_user, get_store().list_projects())
    return {"financials": _financials_or_none(current_user, projects)}


def _financials_or_none(user: CurrentUser, projects):
    if not has_permission(user, Capability.can_view_financials):
        return None
    return aggregate_financials(projects)


@router.get(
    "/ledgers",
    summary="Per-project ledgers: spend, margin, leak and backlog",
    dependencies=[Depends(requires_permission(Capability.can_view_financials))],
)
def ledgers(current_user: CurrentUser = Depends(get_current_user)):
    projects = visible_projects(current_user, get_store().list_projects())
    totals = aggregate_financials(projects)
    return {
        "success": True,
        "accounts": len(projects),
        "totals": totals,
        "netCashFlow": totals["totalCollected"] - totals["totalExpenses"],
        "data": [project_ledger(p) for p in projects],
    }


# ============================================================
# NOTIFICATIONS
# ============================================================
@router.get("/notifications", summary="Notification feed, newest first")
def list_notifications(current_user: CurrentUser = Depends(get_current_user)):
    notifications = get_store().list_notifications()
    return {
        "success": True,
        "unread": sum(1 for n in notifications if not n.read),
        "data": [n.to_wire() for n in notifications],
    }


@router.post("/notifications/read-all", summary="Mark every notification read")
def mark_all_read(current_user: CurrentUser = Depends(get_current_user)):
    count = get_store().mark_all_notifications_read()
    return {"success": True, "marked": count}


@router.post("/notifications/{notification_id}/read", summary="Mark one notification read")
def mark_read(notification_id: str, current_user: CurrentUser = Depends(get_current_user)):
    try:
        notification = get_store().mark_notification_read(notification_id)
    except Exception as e:
        raise handle_store_error(e, "Failed to mark notification read")
    return notification.to_wire()


# ============================================================
# DEADLINE CHECK (manual trigger)
# ============================================================
@router.post("/deadlines/check", summary="Scan tasks for overdue and upcoming deadlines")
def check_deadlines(current_user: CurrentUser = Depends(get_current_user)):
    added = run_deadline_check()
    logger.info(f"{current_user.name} ran deadline check ({len(added)} new)")
    return {
        "success": True,
        "added": len(added),
        "data": [n.to_wire() for n in added],
    }
