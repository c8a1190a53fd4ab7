# core/utils.py

import re
import time
import uuid
from datetime import date, datetime, timezone


def new_id(prefix: str) -> str:
    """Short unique id such as 'p-3f9c2a1b'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def now_ms() -> int:
    return int(time.time() * 1000)


def today_iso() -> str:
    return date.today().isoformat()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def slugify(name: str) -> str:
    """'Construction: Foundation' → 'construction-foundation'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def parse_due_date(value) -> date | None:
    """
    Task due dates are free text ('2024-06-01', 'ASAP', '').
    Returns None for anything that is not a calendar date.
    """
    if not value or not isinstance(value, str) or value.upper() == "ASAP":
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None
