# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Capability,
    StageStatus,
    TaskStatus,
    AssetType,
    MemberStatus,
    NotificationType,
)

# -------------------------
# Permissions
# -------------------------
from .permissions import RolePermissions, CapabilityToggle

# -------------------------
# Projects + Stages
# -------------------------
from .stage import (
    Asset,
    AssetCreate,
    Comment,
    CommentCreate,
    Task,
    TaskWrite,
    Stage,
    StageMetaUpdate,
)
from .project import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    ProjectActivity,
    TeamAssignment,
)

# -------------------------
# Billing
# -------------------------
from .financials import (
    Transaction,
    ProjectFinancials,
    InvoiceCreate,
    PaymentCreate,
)

# -------------------------
# Team + Studio
# -------------------------
from .team import (
    TeamMember,
    TeamMemberInvite,
    TeamMemberUpdate,
    MemberStatusUpdate,
)
from .studio import StudioProfile, StudioProfileUpdate, Notification
