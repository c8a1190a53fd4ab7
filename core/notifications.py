# core/notifications.py
import requests
from datetime import date, timedelta
from typing import Iterable, List, Optional

from core.config import settings
from core.logging_config import logger
from core.utils import now_ms, parse_due_date
from models.enums import NotificationType, TaskStatus
from models.project import Project
from models.studio import Notification


# -----------------------------------------------------
# 📨 Send webhook (Discord, Slack, etc.)
# -----------------------------------------------------
def send_webhook_message(message: str):
    webhook_url = settings.NOTIFICATION_WEBHOOK_URL
    if not webhook_url:
        logger.debug("Webhook URL not configured, skipping.")
        return

    try:
        payload = {"content": message}
        response = requests.post(webhook_url, json=payload, timeout=10)
        logger.info(f"Webhook sent (status {response.status_code})")
    except Exception as e:
        logger.warning(f"Webhook failed: {e}")


# -----------------------------------------------------
# ⏰ Task deadlines
# -----------------------------------------------------
def collect_deadline_notifications(
    projects: Iterable[Project],
    today: Optional[date] = None,
    warning_days: Optional[int] = None,
) -> List[Notification]:
    """
    One notification per incomplete task that is overdue or due within
    `warning_days`. Ids are derived from the task id, so running the
    check again produces the same ids.
    """
    today = today or date.today()
    warning_days = settings.DEADLINE_WARNING_DAYS if warning_days is None else warning_days
    horizon = today + timedelta(days=warning_days)
    timestamp = now_ms()

    found = []
    for p in projects:
        for stage in p.stages:
            for task in stage.tasks:
                if task.status == TaskStatus.completed:
                    continue

                due = parse_due_date(task.due_date)
                if due is None:
                    continue

                if due < today:
                    found.append(Notification(
                        id=f"overdue-{p.id}-{task.id}",
                        title="Task Overdue",
                        message=f'Task "{task.title}" in {p.name} was due on {task.due_date}.',
                        timestamp=timestamp,
                        type=NotificationType.error,
                        project_id=p.id,
                    ))
                elif due <= horizon:
                    found.append(Notification(
                        id=f"upcoming-{p.id}-{task.id}",
                        title="Deadline Approaching",
                        message=f'Task "{task.title}" in {p.name} is due on {task.due_date}.',
                        timestamp=timestamp,
                        type=NotificationType.warning,
                        project_id=p.id,
                    ))

    return found


def run_deadline_check(store=None, today: Optional[date] = None) -> List[Notification]:
    """Add new deadline notifications to the feed and push them to the webhook."""
    if store is None:
        from core.store import get_store
        store = get_store()

    added = store.add_notifications(
        collect_deadline_notifications(store.list_projects(), today=today)
    )

    if added:
        logger.info(f"Deadline check added {len(added)} notification(s)")
        for n in added:
            send_webhook_message(f"[{n.title}] {n.message}")

    return added
