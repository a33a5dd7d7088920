"""
Settings API endpoints.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.guards import ADMIN_ONLY, ANYONE, require_access
from tracklog.app.db.session import get_db
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.config_service import save_config

router = APIRouter(prefix="/config", tags=["Config"])


@router.get("", response_model=AppConfig)
async def get_config(ctx: RequestContext = Depends(require_access(ANYONE))):
    return ctx.config


@router.put("", status_code=status.HTTP_204_NO_CONTENT)
async def update_config(
    config: AppConfig,
    ctx: RequestContext = Depends(require_access(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db),
):
    """
    Save settings (admins only).

    The upload limit is capped by the server limit and tracks are made
    public when authentication is switched off.
    """
    config.version = AppConfig.model_fields["version"].default
    await save_config(db, config)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
