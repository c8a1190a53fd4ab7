from typing import List, Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Blueprint Studio API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = Field(None, description="Dashboard host, with or without scheme")

    STUDIO_DOMAINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Session defaults
    # -------------------------------------------------
    # Admin ("core account") mode when the process starts
    DEFAULT_CORE_ACCOUNT: bool = True

    # coexist  → admin flag always wins, even while previewing another role
    # suppress → previewing another role drops the admin override
    ADMIN_SIMULATION_POLICY: Literal["coexist", "suppress"] = "coexist"

    # -------------------------------------------------
    # Studio limits
    # -------------------------------------------------
    STORAGE_LIMIT_BYTES: int = Field(500 * 1024 ** 3, description="Studio file quota (default: 500 GB)")
    TOTAL_SEATS: int = Field(25, description="Licensed seats for active + pending members")
    PRICE_PER_SEAT: int = Field(1000, description="Monthly price per used seat")

    # -------------------------------------------------
    # Deadline notifications
    # -------------------------------------------------
    DEADLINE_WARNING_DAYS: int = Field(3, description="Warn this many days before a task is due")
    ENABLE_SCHEDULER: bool = False
    DEADLINE_CHECK_MINUTES: int = 60
    NOTIFICATION_WEBHOOK_URL: Optional[str] = None

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the dashboard domain
if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add local studio domains
cors_origins.extend([d.rstrip("/") for d in settings.STUDIO_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
