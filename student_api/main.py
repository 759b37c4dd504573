import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_api.core.config import Settings, get_settings
from student_api.core.handlers import register_exception_handlers
from student_api.core.lifespan import build_lifespan
from student_api.core.logging import configure_logging
from student_api.routers import students

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="student-api",
        description="In-memory student records with generated summaries",
        version="0.1.0",
        lifespan=build_lifespan(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(students.router, prefix="/students", tags=["students"])

    @app.get("/health", tags=["meta"])
    async def healthcheck():
        return {"status": "ok"}

    return app


app = create_app()


def run():
    import uvicorn

    settings = get_settings()
    logger.info(f"API is running on port {settings.port}...")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
