"""Service metadata endpoints."""

from fastapi import APIRouter

from confession_wall.api.dependencies import SettingsDep

router = APIRouter(tags=["system"])


@router.get("/categories")
async def list_categories(app_settings: SettingsDep) -> list[str]:
    """Return the category ids accepted for new confessions."""
    return list(app_settings.allowed_categories)
