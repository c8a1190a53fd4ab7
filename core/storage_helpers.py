# core/storage_helpers.py

"""
File metadata and the studio storage quota.

Files themselves live in object storage; the API only records their
metadata (title, size, type) against a project or stage.
"""

from typing import Iterable, Iterator, Optional

from core.config import settings
from core.errors import QuotaExceeded
from core.utils import new_id, today_iso
from models.enums import AssetType
from models.project import Project
from models.stage import Asset, AssetCreate


_EXTENSION_TYPES = {
    AssetType.image: {"jpg", "png", "jpeg", "gif", "webp"},
    AssetType.pdf: {"pdf"},
    AssetType.cad: {"dwg", "dxf", "rvt", "pln"},
    AssetType.model_3d: {"obj", "fbx", "glb", "max", "skp", "blend"},
}


def determine_asset_type(file_name: str) -> AssetType:
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    for asset_type, extensions in _EXTENSION_TYPES.items():
        if ext in extensions:
            return asset_type
    return AssetType.document


def iter_project_files(project: Project) -> Iterator[Asset]:
    """Every stored file of a project: stage assets, comment attachments and documents."""
    for stage in project.stages:
        yield from stage.assets
        for comment in stage.discussions:
            yield from comment.attachments
    yield from project.documents


def used_storage_bytes(projects: Iterable[Project]) -> int:
    return sum(f.size or 0 for project in projects for f in iter_project_files(project))


def check_storage_quota(projects: Iterable[Project], new_file_size: int, limit: Optional[int] = None) -> bool:
    limit = settings.STORAGE_LIMIT_BYTES if limit is None else limit
    return used_storage_bytes(projects) + new_file_size <= limit


def ensure_storage_quota(projects: Iterable[Project], new_file_size: int):
    if not check_storage_quota(projects, new_file_size):
        raise QuotaExceeded("Storage limit reached. Contact an administrator to upgrade allocation.")


def build_asset(payload: AssetCreate, uploaded_by: str, prefix: str = "a") -> Asset:
    return Asset(
        id=new_id(prefix),
        title=payload.title,
        type=payload.type or determine_asset_type(payload.title),
        url=payload.url,
        uploaded_by=uploaded_by,
        upload_date=today_iso(),
        size=payload.size,
        verification_status=payload.verification_status,
    )


def studio_storage_breakdown(projects: Iterable[Project], limit: Optional[int] = None) -> dict:
    limit = settings.STORAGE_LIMIT_BYTES if limit is None else limit

    breakdown = {"cad": 0, "3d": 0, "image": 0, "other": 0}
    used = 0

    for project in projects:
        for asset in iter_project_files(project):
            size = asset.size or 0
            used += size
            if asset.type == AssetType.cad:
                breakdown["cad"] += size
            elif asset.type == AssetType.model_3d:
                breakdown["3d"] += size
            elif asset.type == AssetType.image:
                breakdown["image"] += size
            else:
                breakdown["other"] += size

    percent = min(used / limit * 100, 100) if limit else 100
    return {
        "usedBytes": used,
        "limitBytes": limit,
        "percentUsed": round(percent, 2),
        "byType": breakdown,
    }


def format_bytes(num_bytes: int, decimals: int = 1) -> str:
    if not num_bytes:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    return f"{round(size, decimals):g} {units[i]}"
