from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Job function used for task assignment and capability lookup."""

    # Core / design team
    principal_architect = "Principal Architect"
    senior_architect = "Senior Architect"
    junior_architect = "Junior Architect"
    project_manager = "Project Manager"

    # Engineering & site
    structural_engineer = "Structural Engineer"
    site_engineer = "Site Engineer"
    main_engineer = "Main Engineer"
    construction_manager = "Construction Manager"
    construction_supervisor = "Construction Supervisor"
    head_carpenter = "Head Carpenter"

    # Client & business
    client = "Client"
    developer = "Developer"
    account_manager = "Account Manager"
    business_analyst = "Business Analyst"
    marketing = "Marketing Dept"

    # Specialized / documentation
    photographer = "Project Photographer"
    site_documentation = "Site Documentation"
    award_submission = "Award Submission Team"


# -----------------------------------------------------
# CAPABILITY
# -----------------------------------------------------
class Capability(BaseStrEnum):
    """The four permission flags. Values are the wire names."""

    can_edit = "canEdit"
    can_upload = "canUpload"
    can_view_financials = "canViewFinancials"
    can_manage_team = "canManageTeam"


# -----------------------------------------------------
# STAGE / TASK STATUS
# -----------------------------------------------------
class StageStatus(BaseStrEnum):
    pending = "pending"
    active = "active"
    completed = "completed"


class TaskStatus(BaseStrEnum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


# -----------------------------------------------------
# ASSETS
# -----------------------------------------------------
class AssetType(BaseStrEnum):
    image = "image"
    pdf = "pdf"
    cad = "cad"
    model_3d = "3d"
    document = "document"


class VerificationStatus(BaseStrEnum):
    """Review state for official project documents."""

    verified = "verified"
    pending = "pending"
    none = "none"


# -----------------------------------------------------
# FINANCIALS
# -----------------------------------------------------
class TransactionType(BaseStrEnum):
    invoice = "invoice"
    payment = "payment"
    expense = "expense"


class TransactionStatus(BaseStrEnum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"


class ExpenseCategory(BaseStrEnum):
    material = "Material"
    labor = "Labor"
    service = "Service"
    permit = "Permit"
    overhead = "Overhead"


class ExpenseStatus(BaseStrEnum):
    estimated = "estimated"
    purchased = "purchased"
    invoiced = "invoiced"


class StagePaymentStatus(BaseStrEnum):
    """Derived billing state of a single stage."""

    paid = "paid"
    partial = "partial"
    unpaid = "unpaid"
    none = "none"


# -----------------------------------------------------
# TEAM / NOTIFICATIONS
# -----------------------------------------------------
class MemberStatus(BaseStrEnum):
    active = "active"
    inactive = "inactive"
    pending = "pending"


class NotificationType(BaseStrEnum):
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"
