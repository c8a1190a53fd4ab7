# models/stage.py

from typing import List, Optional
from pydantic import Field, field_validator, model_validator

from models.base import CamelModel
from models.enums import (
    AssetType,
    ExpenseCategory,
    ExpenseStatus,
    Role,
    StageStatus,
    TaskStatus,
    VerificationStatus,
)


# -------------------------------------------------
# Assets (stage files + project documents)
# -------------------------------------------------
class Asset(CamelModel):
    id: str
    title: str
    type: AssetType
    url: str = "#"
    uploaded_by: str
    upload_date: str
    size: Optional[int] = None          # bytes
    verification_status: Optional[VerificationStatus] = None


class AssetCreate(CamelModel):
    """
    Metadata for a file that has already been stored.
    Type is derived from the file name when omitted.
    """
    title: str = Field(..., min_length=1)
    url: str = "#"
    size: int = Field(0, ge=0)
    type: Optional[AssetType] = None
    verification_status: Optional[VerificationStatus] = None


# -------------------------------------------------
# Discussions
# -------------------------------------------------
class Comment(CamelModel):
    id: str
    author: str
    role: Role
    text: str
    timestamp: int                      # epoch milliseconds
    attachments: List[Asset] = []


class CommentCreate(CamelModel):
    text: str = Field(..., min_length=1)
    attachments: List[AssetCreate] = []


# -------------------------------------------------
# Tasks
# -------------------------------------------------
class Task(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    benchmark: Optional[str] = None
    requirements: List[str] = []
    assigned_to: Role
    assignee_name: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    due_date: str = "ASAP"
    completed_at: Optional[int] = None
    dependencies: List[str] = []


class TaskWrite(CamelModel):
    """Create/replace payload for a task. Status is changed via toggle only."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    benchmark: Optional[str] = None
    requirements: List[str] = []
    assigned_to: Role = Role.principal_architect
    assignee_name: Optional[str] = None
    due_date: Optional[str] = None
    dependencies: List[str] = []

    @field_validator("requirements", mode="before")
    def split_requirements(cls, v):
        # Forms send one requirement per line
        if isinstance(v, str):
            v = v.split("\n")
        return [r.strip() for r in (v or []) if r and r.strip()]

    @field_validator("assignee_name", "due_date", mode="before")
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# -------------------------------------------------
# Expenses
# -------------------------------------------------
class ExpenseItem(CamelModel):
    id: str
    description: str
    category: ExpenseCategory
    vendor: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    unit_price: Optional[float] = None
    total_amount: float
    date: str
    status: ExpenseStatus = ExpenseStatus.estimated
    invoice_id: Optional[str] = None


class ExpenseCreate(CamelModel):
    """
    A cost booked against a stage. The total is quantity x unit price
    when not given directly.
    """
    description: str = Field(..., min_length=1)
    category: ExpenseCategory = ExpenseCategory.material
    vendor: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    unit_price: Optional[float] = Field(None, ge=0)
    total_amount: Optional[float] = Field(None, ge=0)
    date: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.estimated

    @model_validator(mode="after")
    def fill_total(self):
        if self.total_amount is None:
            if self.quantity is None or self.unit_price is None:
                raise ValueError("totalAmount or quantity and unitPrice are required")
            self.total_amount = round(self.quantity * self.unit_price, 2)
        return self


# -------------------------------------------------
# Stage
# -------------------------------------------------
class Stage(CamelModel):
    id: str
    name: str
    status: StageStatus = StageStatus.pending
    description: Optional[str] = None
    tasks: List[Task] = []
    assets: List[Asset] = []
    discussions: List[Comment] = []
    participants: List[str] = []
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    expenses: List[ExpenseItem] = []


class StageMetaUpdate(CamelModel):
    status: Optional[StageStatus] = None
    start_date: Optional[str] = None
