# routers/billing.py

from fastapi import APIRouter, HTTPException, Depends

from dependencies.auth import get_current_user, requires_role, CurrentUser
from core.billing_helpers import apply_payment, billing_summary, create_invoice
from core.permission_helpers import admin_required, has_permission, is_admin
from core.project_helpers import load_project, save_project
from models.enums import Capability, Role
from models.financials import InvoiceCreate, PaymentCreate


router = APIRouter(
    prefix="/projects/{project_id}/billing",
    tags=["Billing"],
)


def can_view_billing(user: CurrentUser) -> bool:
    """Admins, the client, and roles that can view financials."""
    return (
        is_admin(user)
        or user.role == Role.client.value
        or has_permission(user, Capability.can_view_financials)
    )


@router.get("", summary="Billing summary for a project")
def get_billing(project_id: str, current_user: CurrentUser = Depends(get_current_user)):
    if not can_view_billing(current_user):
        raise HTTPException(403, "Billing is not visible to your role")

    project = load_project(project_id, current_user)
    return billing_summary(project)


@router.post("/invoices", status_code=201, summary="Raise an invoice (core account)")
def raise_invoice(project_id: str, payload: InvoiceCreate, current_user: CurrentUser = Depends(admin_required)):
    project = load_project(project_id, current_user)
    invoice = create_invoice(project, payload)
    save_project(project, current_user, "Raised invoice", invoice.description)
    return {
        "invoice": invoice.to_wire(),
        "summary": billing_summary(project),
    }


@router.post("/payments", status_code=201, summary="Pay an invoice or the outstanding balance")
def make_payment(
    project_id: str,
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(requires_role([Role.client.value])),
):
    project = load_project(project_id, current_user)
    payment = apply_payment(project, payload.invoice_id)
    save_project(project, current_user, f"Paid {payment.amount:,.0f} via {payload.method}", payment.reference)
    return {
        "payment": payment.to_wire(),
        "summary": billing_summary(project),
    }
