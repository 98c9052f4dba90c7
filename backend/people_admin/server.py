"""FastAPI application for people-admin.

Run with: uvicorn people_admin.server:app --host 0.0.0.0 --port 8394 --reload
Or: people-admin start
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from people_admin import __version__
from people_admin.config import get_api_base_url
from people_admin.routes import health, people

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="People Admin",
    description="Admin backend for managing people and their contact details",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost",
        "http://localhost:5173",
        "http://localhost:8394",
        "http://127.0.0.1",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8394",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(people.router)


@app.on_event("startup")
async def on_startup():
    logger.info("People Admin server started (people API at %s).", get_api_base_url())
