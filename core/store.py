# core/store.py

"""
In-memory studio state.

Everything the dashboard shows lives here for the lifetime of the process.
Reads hand out deep copies and writes replace whole objects, so a caller
can never change stored state by mutating something it was given.
"""

from typing import Dict, List, Optional
from threading import RLock

from core.errors import DuplicateRecord, RecordNotFound
from core.logging_config import logger
from core.permissions import ROLE_PERMISSIONS
from core import seed
from models.enums import Capability
from models.permissions import RolePermissions
from models.project import Project
from models.studio import Notification, StudioProfile
from models.team import TeamMember


class StudioStore:
    """
    Projects, team members, notifications, the role permission table
    and the studio profile.

    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._lock = RLock()
        self._projects: Dict[str, Project] = {}
        self._members: Dict[str, TeamMember] = {}
        self._notifications: List[Notification] = []
        self._role_permissions: Dict[str, RolePermissions] = dict(ROLE_PERMISSIONS)
        self._profile: Optional[StudioProfile] = None

    # -------------------------------------------------
    # Projects
    # -------------------------------------------------
    def list_projects(self) -> List[Project]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._projects.values()]

    def get_project(self, project_id: str) -> Project:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                raise RecordNotFound(f"Project '{project_id}' not found")
            return project.model_copy(deep=True)

    def add_project(self, project: Project) -> Project:
        with self._lock:
            if project.id in self._projects:
                raise DuplicateRecord(f"Project '{project.id}' already exists")
            self._projects[project.id] = project.model_copy(deep=True)
            return project

    def replace_project(self, project: Project) -> Project:
        with self._lock:
            if project.id not in self._projects:
                raise RecordNotFound(f"Project '{project.id}' not found")
            self._projects[project.id] = project.model_copy(deep=True)
            return project

    def delete_project(self, project_id: str) -> None:
        with self._lock:
            if self._projects.pop(project_id, None) is None:
                raise RecordNotFound(f"Project '{project_id}' not found")

    # -------------------------------------------------
    # Team members
    # -------------------------------------------------
    def list_members(self) -> List[TeamMember]:
        with self._lock:
            return [m.model_copy(deep=True) for m in self._members.values()]

    def get_member(self, member_id: str) -> TeamMember:
        with self._lock:
            member = self._members.get(member_id)
            if member is None:
                raise RecordNotFound(f"Team member '{member_id}' not found")
            return member.model_copy(deep=True)

    def add_member(self, member: TeamMember) -> TeamMember:
        with self._lock:
            if member.id in self._members:
                raise DuplicateRecord(f"Team member '{member.id}' already exists")
            email = member.email.lower()
            if any(m.email.lower() == email for m in self._members.values()):
                raise DuplicateRecord(f"A member with email '{member.email}' already exists")
            self._members[member.id] = member.model_copy(deep=True)
            return member

    def replace_member(self, member: TeamMember) -> TeamMember:
        with self._lock:
            if member.id not in self._members:
                raise RecordNotFound(f"Team member '{member.id}' not found")
            email = member.email.lower()
            if any(m.email.lower() == email for m in self._members.values() if m.id != member.id):
                raise DuplicateRecord(f"A member with email '{member.email}' already exists")
            self._members[member.id] = member.model_copy(deep=True)
            return member

    # -------------------------------------------------
    # Notifications
    # -------------------------------------------------
    def list_notifications(self) -> List[Notification]:
        with self._lock:
            return [n.model_copy() for n in self._notifications]

    def add_notifications(self, notifications: List[Notification]) -> List[Notification]:
        """
        Prepend notifications whose id is not already present.
        Returns the ones actually added.
        """
        with self._lock:
            existing_ids = {n.id for n in self._notifications}
            added = []
            for n in notifications:
                if n.id in existing_ids:
                    continue
                existing_ids.add(n.id)
                added.append(n.model_copy())
            self._notifications = added + self._notifications
            return [n.model_copy() for n in added]

    def mark_notification_read(self, notification_id: str) -> Notification:
        with self._lock:
            for i, n in enumerate(self._notifications):
                if n.id == notification_id:
                    self._notifications[i] = n.model_copy(update={"read": True})
                    return self._notifications[i].model_copy()
            raise RecordNotFound(f"Notification '{notification_id}' not found")

    def mark_all_notifications_read(self) -> int:
        with self._lock:
            unread = sum(1 for n in self._notifications if not n.read)
            self._notifications = [n.model_copy(update={"read": True}) for n in self._notifications]
            return unread

    # -------------------------------------------------
    # Role permission table
    # -------------------------------------------------
    def get_role_permissions(self) -> Dict[str, RolePermissions]:
        with self._lock:
            return dict(self._role_permissions)

    def toggle_role_permission(self, role: str, capability: Capability) -> RolePermissions:
        with self._lock:
            if role not in self._role_permissions:
                raise RecordNotFound(f"Role '{role}' not found")
            current = self._role_permissions[role]
            updated = current.with_flag(capability, not current.grants(capability))
            self._role_permissions[role] = updated
            return updated

    # -------------------------------------------------
    # Studio profile
    # -------------------------------------------------
    def get_profile(self) -> StudioProfile:
        with self._lock:
            if self._profile is None:
                raise RecordNotFound("Studio profile not configured")
            return self._profile.model_copy(deep=True)

    def replace_profile(self, profile: StudioProfile) -> StudioProfile:
        with self._lock:
            self._profile = profile.model_copy(deep=True)
            return profile

    # -------------------------------------------------
    # Bulk
    # -------------------------------------------------
    def load_seed(self):
        with self._lock:
            self._projects = {p.id: p for p in seed.seed_projects()}
            self._members = {m.id: m for m in seed.seed_team_members()}
            self._notifications = seed.seed_notifications()
            self._role_permissions = dict(ROLE_PERMISSIONS)
            self._profile = seed.seed_studio_profile()
        logger.info(
            f"Studio store seeded ({len(self._projects)} projects, {len(self._members)} members)"
        )

    def stats(self) -> dict:
        with self._lock:
            return {
                "projects": len(self._projects),
                "members": len(self._members),
                "notifications": len(self._notifications),
                "roles": len(self._role_permissions),
            }


# Global store instance
_store = StudioStore()
_store.load_seed()


def get_store() -> StudioStore:
    """Get the global store instance."""
    return _store


def reset_store():
    """Drop all session changes and reload the seed data."""
    _store.load_seed()
