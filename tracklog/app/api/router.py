"""
API Router.

Aggregates all REST endpoints mounted under settings.api_prefix.
"""

from fastapi import APIRouter
from tracklog.app.api.endpoints import config, locales, positions, session, tracks, users

router = APIRouter()

# Session and settings
router.include_router(session.router)
router.include_router(config.router)
router.include_router(locales.router)

# Tracking data
router.include_router(tracks.router)
router.include_router(positions.router)
router.include_router(users.router)
