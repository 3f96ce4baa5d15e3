"""
Mail Attachments API
FastAPI application that normalizes attachment descriptors for mail composers.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from mailattach.routers import attachments

load_dotenv()

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

app = FastAPI(
    title="Mail Attachments API",
    description="Normalizes attachment descriptors into MIME-ready records",
    version=API_VERSION,
)

# Include routers
app.include_router(attachments.router, prefix="/api/attachments", tags=["attachments"])


@app.on_event("startup")
async def log_startup_url() -> None:
    """
    Log the URL the API is accessible at.

    The port is taken from ``HOST_PORT`` so Docker-mapped ports are reported
    correctly. Defaults to 8000.
    """
    host_port = os.getenv("HOST_PORT", "8000")
    logger.info("Mail Attachments API running at http://localhost:%s", host_port)


@app.get("/")
async def root():
    return {"message": "Mail Attachments API", "version": API_VERSION}


@app.get("/health")
async def health():
    return {"status": "ok"}
