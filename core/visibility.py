# core/visibility.py

"""
Redaction of data the current user may not see.

Callers pass an already-evaluated capability boolean; this module never
looks up permissions itself.
"""

from typing import Any, Iterable

REDACTED = "HIDDEN"

PROJECT_FINANCIAL_FIELDS = ("budget", "financials")
STAGE_FINANCIAL_FIELDS = ("expenses",)
MEMBER_FINANCIAL_FIELDS = ("monthlyCost",)
CLIENT_FINANCIAL_FIELDS = ("totalInvoiced", "totalCollected", "totalBudget")


def redact(allowed: bool, value: Any) -> Any:
    """The value itself when allowed, otherwise the redaction marker."""
    return value if allowed else REDACTED


def redact_fields(payload: dict, fields: Iterable[str], allowed: bool) -> dict:
    """Copy of `payload` with the listed keys redacted (keys that are absent stay absent)."""
    if allowed:
        return dict(payload)
    clean = dict(payload)
    for field in fields:
        if field in clean:
            clean[field] = REDACTED
    return clean


def redact_project(payload: dict, allowed: bool) -> dict:
    return redact_fields(payload, PROJECT_FINANCIAL_FIELDS, allowed)


def redact_stage(payload: dict, allowed: bool) -> dict:
    return redact_fields(payload, STAGE_FINANCIAL_FIELDS, allowed)


def redact_member(payload: dict, allowed: bool) -> dict:
    return redact_fields(payload, MEMBER_FINANCIAL_FIELDS, allowed)


def redact_client(payload: dict, allowed: bool) -> dict:
    return redact_fields(payload, CLIENT_FINANCIAL_FIELDS, allowed)


def is_redacted(value: Any) -> bool:
    return value == REDACTED
