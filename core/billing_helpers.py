# core/billing_helpers.py

"""
Client billing: invoices raised by the studio, payments made by the client
and the costs the studio books against each stage.

All functions work on a project copy and return it; the caller stores the
result with a single replace_project() call.
"""

import random
from typing import Optional

from fastapi import HTTPException

from core.utils import new_id, now_iso, today_iso
from models.enums import StagePaymentStatus, TransactionStatus, TransactionType
from models.financials import InvoiceCreate, Transaction
from models.project import Project
from models.stage import ExpenseCreate, ExpenseItem, Stage


def stage_financials(project: Project, stage_id: str) -> dict:
    txs = [t for t in project.financials.transactions if t.stage_id == stage_id]
    invoiced = sum(t.amount for t in txs if t.type == TransactionType.invoice)
    paid = sum(t.amount for t in txs if t.type == TransactionType.payment)
    pending = max(0, invoiced - paid)

    status = StagePaymentStatus.none
    if invoiced > 0:
        if paid >= invoiced:
            status = StagePaymentStatus.paid
        elif paid > 0:
            status = StagePaymentStatus.partial
        else:
            status = StagePaymentStatus.unpaid

    return {
        "stageId": stage_id,
        "invoiced": invoiced,
        "paid": paid,
        "pending": pending,
        "status": status.value,
    }


def billing_summary(project: Project) -> dict:
    f = project.financials
    total_contract = project.budget
    total_paid = f.total_collected
    total_invoiced = f.total_invoiced

    progress = min(total_paid / total_contract * 100, 100) if total_contract else 0

    return {
        "projectId": project.id,
        "totalContract": total_contract,
        "totalPaid": total_paid,
        "totalInvoiced": total_invoiced,
        "pendingPayment": max(0, total_invoiced - total_paid),
        "progress": round(progress, 2),
        "paymentCount": sum(1 for t in f.transactions if t.type == TransactionType.payment),
        "stages": [
            {"name": s.name, **stage_financials(project, s.id)}
            for s in project.stages
        ],
        "transactions": [t.to_wire() for t in f.transactions],
    }


def create_invoice(project: Project, payload: InvoiceCreate) -> Transaction:
    stage_id = payload.stage_id or project.current_stage_id
    if project.find_stage(stage_id) is None:
        raise HTTPException(404, f"Stage '{stage_id}' not found")

    invoice = Transaction(
        id=new_id("inv"),
        date=now_iso(),
        description=payload.description,
        amount=payload.amount,
        type=TransactionType.invoice,
        status=TransactionStatus.pending,
        stage_id=stage_id,
        due_date=payload.due_date,
    )

    f = project.financials
    project.financials = f.model_copy(update={
        "total_invoiced": f.total_invoiced + invoice.amount,
        "pending_bills": f.pending_bills + invoice.amount,
        "transactions": [*f.transactions, invoice],
    })
    return invoice


def apply_payment(project: Project, invoice_id: Optional[str] = None) -> Transaction:
    """
    Pay a specific invoice, or the outstanding balance when no invoice is given.
    """
    f = project.financials
    invoice = None

    if invoice_id:
        invoice = next(
            (t for t in f.transactions if t.id == invoice_id and t.type == TransactionType.invoice),
            None,
        )
        if invoice is None:
            raise HTTPException(404, f"Invoice '{invoice_id}' not found")
        if invoice.status == TransactionStatus.paid:
            raise HTTPException(409, f"Invoice '{invoice_id}' is already paid")
        amount = invoice.amount
    else:
        amount = max(0, f.total_invoiced - f.total_collected)

    if amount <= 0:
        raise HTTPException(409, "Nothing is due on this project")

    payment = Transaction(
        id=new_id("pay"),
        date=now_iso(),
        description=f"Payment for {invoice.description if invoice else 'Account Balance'}",
        amount=amount,
        type=TransactionType.payment,
        status=TransactionStatus.paid,
        reference=f"TXN-{random.randint(0, 9999):04d}",
        stage_id=(invoice.stage_id if invoice else None) or project.current_stage_id,
    )

    transactions = [
        t.model_copy(update={"status": TransactionStatus.paid}) if invoice and t.id == invoice.id else t
        for t in f.transactions
    ]

    project.financials = f.model_copy(update={
        "total_collected": f.total_collected + amount,
        "pending_bills": max(0, f.pending_bills - amount),
        "transactions": [*transactions, payment],
    })
    return payment


# -----------------------------------------------------
# Stage expenses (studio costs)
# -----------------------------------------------------
def record_stage_expense(project: Project, stage: Stage, payload: ExpenseCreate) -> ExpenseItem:
    expense = ExpenseItem(
        id=new_id("exp"),
        description=payload.description,
        category=payload.category,
        vendor=payload.vendor,
        quantity=payload.quantity,
        unit=payload.unit,
        unit_price=payload.unit_price,
        total_amount=payload.total_amount,
        date=payload.date or today_iso(),
        status=payload.status,
    )
    stage.expenses = [*stage.expenses, expense]

    f = project.financials
    project.financials = f.model_copy(update={"total_expenses": f.total_expenses + expense.total_amount})
    return expense


def remove_stage_expense(project: Project, stage: Stage, expense_id: str) -> ExpenseItem:
    expense = next((e for e in stage.expenses if e.id == expense_id), None)
    if expense is None:
        raise HTTPException(404, f"Expense '{expense_id}' not found in stage '{stage.id}'")

    stage.expenses = [e for e in stage.expenses if e.id != expense_id]

    f = project.financials
    project.financials = f.model_copy(update={
        "total_expenses": max(0, f.total_expenses - expense.total_amount),
    })
    return expense


# -----------------------------------------------------
# Ledgers
# -----------------------------------------------------
def stage_cost(stage: Stage) -> float:
    return sum(e.total_amount for e in stage.expenses)


def project_ledger(project: Project) -> dict:
    """
    Spend against billing for one project. Spend is what was booked on
    the stages; the leak is spend not yet covered by invoices and the
    backlog is invoiced money not yet collected.
    """
    f = project.financials
    spent = sum(stage_cost(s) for s in project.stages)
    margin = f.total_invoiced - spent
    backlog = f.total_invoiced - f.total_collected

    return {
        "projectId": project.id,
        "name": project.name,
        "clientName": project.client_name,
        "budget": project.budget,
        "invoiced": f.total_invoiced,
        "collected": f.total_collected,
        "spent": spent,
        "margin": margin,
        "leak": max(0, spent - f.total_invoiced),
        "backlog": backlog,
        "netMarginPercent": round(margin / (f.total_invoiced or 1) * 100, 1),
        "status": "Owes Funds" if backlog > 0 else "Settled",
        "stages": [
            {"stageId": s.id, "name": s.name, "status": s.status.value, "cost": stage_cost(s)}
            for s in project.stages
        ],
        "transactions": [t.to_wire() for t in f.transactions],
    }
