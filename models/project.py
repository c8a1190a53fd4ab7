# models/project.py

from typing import Dict, List, Optional
from pydantic import Field, field_validator

from models.base import CamelModel
from models.enums import Role
from models.financials import ProjectFinancials
from models.stage import Asset, Stage


MAX_GALLERY_IMAGES = 10

DEFAULT_PROJECT_TYPES = [
    "Residential", "Commercial", "Hospitality", "Healthcare",
    "Institutional", "Mixed-Use", "Industrial",
]

DEFAULT_CLASSIFICATIONS = ["Public", "Private", "Semi-Public"]


def _validate_team(team: Dict[str, str]) -> Dict[str, str]:
    known = set(Role.list())
    clean = {}
    for role, name in (team or {}).items():
        role = str(role)
        if role not in known:
            raise ValueError(f"Unknown role in team: {role}")
        if name:
            clean[role] = name
    return clean


def _validate_gallery(gallery: Optional[List[str]]):
    if gallery is not None and len(gallery) > MAX_GALLERY_IMAGES:
        raise ValueError(f"Gallery is limited to {MAX_GALLERY_IMAGES} images")
    return gallery


class ProjectActivity(CamelModel):
    id: str
    user: str
    action: str
    target: Optional[str] = None
    timestamp: int


# -------------------------------------------------
# Project aggregate
# -------------------------------------------------
class Project(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    location: str = ""
    google_map_link: Optional[str] = None
    client_name: str = ""
    client_point_of_contact: Optional[str] = None
    client_email: Optional[str] = None
    type: str = "Residential"
    classification: str = "Private"
    square_footage: float = 0
    budget: float = 0
    financials: ProjectFinancials = Field(default_factory=ProjectFinancials)
    current_stage_id: str = ""
    stages: List[Stage] = []
    documents: List[Asset] = []
    thumbnail_url: str = ""
    gallery: List[str] = []
    # Partial map: role value -> person name
    team: Dict[str, str] = {}
    history: List[ProjectActivity] = []

    @field_validator("team")
    def check_team(cls, v):
        return _validate_team(v)

    @field_validator("gallery")
    def check_gallery(cls, v):
        return _validate_gallery(v)

    def find_stage(self, stage_id: str) -> Optional[Stage]:
        return next((s for s in self.stages if s.id == stage_id), None)

    def stage_index(self, stage_id: str) -> int:
        return next((i for i, s in enumerate(self.stages) if s.id == stage_id), -1)


# -------------------------------------------------
# Create / Update payloads
# -------------------------------------------------
class ProjectCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    google_map_link: Optional[str] = None
    client_name: Optional[str] = None
    client_point_of_contact: Optional[str] = None
    client_email: Optional[str] = None
    type: Optional[str] = None
    classification: Optional[str] = None
    square_footage: Optional[float] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    financials: Optional[ProjectFinancials] = None
    thumbnail_url: Optional[str] = None
    gallery: Optional[List[str]] = None

    @field_validator("gallery")
    def check_gallery(cls, v):
        return _validate_gallery(v)


class ProjectUpdate(CamelModel):
    """
    Editable scalar fields only. Stages, team, documents and
    financials are owned by their own endpoints.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    google_map_link: Optional[str] = None
    client_name: Optional[str] = None
    client_point_of_contact: Optional[str] = None
    client_email: Optional[str] = None
    type: Optional[str] = None
    classification: Optional[str] = None
    square_footage: Optional[float] = Field(None, ge=0)
    budget: Optional[float] = Field(None, ge=0)
    thumbnail_url: Optional[str] = None
    gallery: Optional[List[str]] = None

    @field_validator("gallery")
    def check_gallery(cls, v):
        return _validate_gallery(v)


class TeamAssignment(CamelModel):
    member_name: str = Field(..., min_length=1)
