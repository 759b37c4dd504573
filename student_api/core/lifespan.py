import logging
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI

from student_api.clients.ollama import OllamaClient
from student_api.core.config import Settings
from student_api.services.store import StudentStore

logger = logging.getLogger(__name__)


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        app.state.store = StudentStore()
        session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=settings.summary_timeout_seconds)
        )
        app.state.summary_client = OllamaClient(
            session, url=settings.ollama_url, model=settings.ollama_model
        )
        logger.info(f"Summary client ready: {app.state.summary_client!r}")
        try:
            yield
        finally:
            # Shutdown
            await session.close()
            logger.info("Summary client session closed.")

    return lifespan
