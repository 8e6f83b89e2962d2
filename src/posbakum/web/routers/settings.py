from fastapi import APIRouter

from posbakum.core.modules.settings.models import AppSettings
from posbakum.web.deps import AppDep

router = APIRouter(tags=["settings"])


@router.get("/settings", summary="Branding settings", operation_id="getSettings")
async def get_settings(app: AppDep) -> AppSettings:
    return await app.get_settings()
