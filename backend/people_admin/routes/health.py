"""Health check endpoint for people-admin.

Returns server status along with the configured people API location
and whether that API currently answers.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from people_admin.people_api import PeopleAPIClient, get_people_api

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/health")
async def health(api: PeopleAPIClient = Depends(get_people_api)):
    """Health check endpoint.

    The server itself is always ``ok`` here; an unreachable people API is
    reported separately so the admin UI can show a banner instead of
    failing outright.
    """
    api_reachable = await api.is_reachable()
    if not api_reachable:
        logger.warning("Health check: people API at %s is not reachable", api.base_url)

    return {
        "status": "ok",
        "api_base_url": api.base_url,
        "api_reachable": api_reachable,
    }
