# core/session.py

"""
The dashboard has a single operator. Their identity, the role they are
currently viewing as, and the core-account (admin) toggle live here.
"""

from threading import Lock
from typing import Optional

from pydantic import BaseModel

from core.config import settings
from core.logging_config import logger
from models.enums import Role


DEFAULT_MEMBER_ID = "m1"


class StudioSession(BaseModel):
    member_id: str = DEFAULT_MEMBER_ID
    # None means "my own member role"
    simulated_role: Optional[str] = None
    is_core_account: bool = True


_lock = Lock()
_session = StudioSession(is_core_account=settings.DEFAULT_CORE_ACCOUNT)


def get_session() -> StudioSession:
    with _lock:
        return _session.model_copy()


def set_role(role: Role) -> StudioSession:
    """
    Switch the role being viewed. Viewing as the client always leaves
    core-account mode so the client portal shows what a client sees.
    """
    global _session
    with _lock:
        update = {"simulated_role": role.value}
        if role == Role.client:
            update["is_core_account"] = False
        _session = _session.model_copy(update=update)
        logger.info(f"Session role switched to '{role.value}'")
        return _session.model_copy()


def set_core_account(enabled: bool) -> StudioSession:
    global _session
    with _lock:
        _session = _session.model_copy(update={"is_core_account": enabled})
        logger.info(f"Core account mode {'enabled' if enabled else 'disabled'}")
        return _session.model_copy()


def set_member(member_id: str) -> StudioSession:
    """Act as another member. The role view resets to their own role."""
    global _session
    with _lock:
        _session = _session.model_copy(update={"member_id": member_id, "simulated_role": None})
        logger.info(f"Session now acting as member '{member_id}'")
        return _session.model_copy()


def reset_session():
    global _session
    with _lock:
        _session = StudioSession(is_core_account=settings.DEFAULT_CORE_ACCOUNT)
