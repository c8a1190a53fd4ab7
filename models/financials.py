# models/financials.py

from typing import List, Optional
from pydantic import Field

from models.base import CamelModel
from models.enums import TransactionStatus, TransactionType
from models.stage import ExpenseItem


class Transaction(CamelModel):
    id: str
    date: str
    description: str
    amount: float
    type: TransactionType
    status: TransactionStatus = TransactionStatus.pending
    reference: Optional[str] = None
    items: List[ExpenseItem] = []
    stage_id: Optional[str] = None
    due_date: Optional[str] = None      # invoices only


class ProjectFinancials(CamelModel):
    total_invoiced: float = 0
    total_collected: float = 0
    total_expenses: float = 0
    pending_bills: float = 0
    transactions: List[Transaction] = []


# -------------------------------------------------
# Billing payloads
# -------------------------------------------------
class InvoiceCreate(CamelModel):
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    stage_id: Optional[str] = None
    due_date: Optional[str] = None


class PaymentCreate(CamelModel):
    """Pay one invoice, or the whole outstanding balance when invoice_id is omitted."""
    invoice_id: Optional[str] = None
    method: str = "card"
