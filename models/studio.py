# models/studio.py

from typing import List, Optional

from models.base import CamelModel
from models.enums import NotificationType


class StudioProfile(CamelModel):
    name: str
    tagline: str = ""
    description: str = ""
    website: str = ""
    email: str = ""
    location: str = ""
    founded_year: int
    logo_url: str = ""
    hero_image_url: str = ""
    specialties: List[str] = []


class StudioProfileUpdate(CamelModel):
    name: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    founded_year: Optional[int] = None
    logo_url: Optional[str] = None
    hero_image_url: Optional[str] = None
    specialties: Optional[List[str]] = None


class Notification(CamelModel):
    id: str
    title: str
    message: str
    timestamp: int
    read: bool = False
    type: NotificationType = NotificationType.info
    project_id: Optional[str] = None
