# core/team_helpers.py

from typing import Iterable, List, Optional

from core.config import settings
from core.utils import new_id, today_iso
from core.visibility import redact_client, redact_member
from models.enums import MemberStatus, Role
from models.project import Project
from models.team import TeamMember, TeamMemberInvite


ARCHITECT_ROLES = {
    Role.principal_architect,
    Role.senior_architect,
    Role.junior_architect,
}


def member_projects(member: TeamMember, projects: Iterable[Project]) -> List[Project]:
    return [p for p in projects if member.name in p.team.values()]


def staff_overview(
    members: Iterable[TeamMember],
    projects: Iterable[Project],
    show_costs: bool,
    q: Optional[str] = None,
    role: Optional[str] = None,
) -> dict:
    projects = list(projects)
    needle = (q or "").lower()

    rows = []
    for m in members:
        if needle and needle not in m.name.lower() and needle not in m.email.lower():
            continue
        if role and role != "All" and m.role.value != role:
            continue

        assigned = member_projects(m, projects)
        row = m.to_wire()
        row["activeProjectCount"] = len(assigned)
        row["projectNames"] = [p.name for p in assigned]
        rows.append((m, row))

    active = [(m, r) for m, r in rows if m.status in (MemberStatus.active, MemberStatus.pending)]
    inactive = [(m, r) for m, r in rows if m.status == MemberStatus.inactive]
    payroll = sum(m.monthly_cost for m, _ in active)

    return {
        "active": [redact_member(r, show_costs) for _, r in active],
        "inactive": [redact_member(r, show_costs) for _, r in inactive],
        "totalMonthlyPayroll": payroll if show_costs else None,
    }


def client_overview(projects: Iterable[Project], show_money: bool, q: Optional[str] = None) -> List[dict]:
    clients = {}
    for p in projects:
        entry = clients.setdefault(p.client_name, {
            "name": p.client_name,
            "projects": [],
            "totalInvoiced": 0,
            "totalCollected": 0,
            "totalBudget": 0,
        })
        entry["projects"].append({"id": p.id, "name": p.name})
        entry["totalInvoiced"] += p.financials.total_invoiced
        entry["totalCollected"] += p.financials.total_collected
        entry["totalBudget"] += p.budget

    needle = (q or "").lower()
    result = [c for c in clients.values() if needle in c["name"].lower()]
    return [redact_client(c, show_money) for c in result]


def seat_usage(members: Iterable[TeamMember]) -> dict:
    used = sum(1 for m in members if m.status in (MemberStatus.active, MemberStatus.pending))
    return {
        "usedSeats": used,
        "totalSeats": settings.TOTAL_SEATS,
        "pricePerSeat": settings.PRICE_PER_SEAT,
        "monthlyCost": used * settings.PRICE_PER_SEAT,
    }


def build_invited_member(payload: TeamMemberInvite) -> TeamMember:
    return TeamMember(
        id=new_id("m"),
        name=payload.name or "",
        role=payload.role,
        email=payload.email,
        monthly_cost=payload.monthly_cost,
        status=MemberStatus.pending,
        joined_date=today_iso(),
    )
