from fastapi import APIRouter, Depends

from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.depends import get_auth_settings

router = APIRouter()


@router.get("/health")
async def health(settings: AuthSettings = Depends(get_auth_settings)):
    return {"status": "ok", "environment": settings.environment}
