"""
Locale API endpoint.
"""

from fastapi import APIRouter, Depends
from tracklog.app.core.dependencies import RequestContext
from tracklog.app.core.guards import ANYONE, require_access
from tracklog.app.services.locales import LANGUAGES, get_strings

router = APIRouter(tags=["Locales"])


@router.get("/locales")
async def get_locales(ctx: RequestContext = Depends(require_access(ANYONE))):
    """Supported languages plus the strings of the configured language."""
    result = {"langArr": dict(LANGUAGES)}
    result.update(get_strings(ctx.config.lang))
    return result
