from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from directory.api.error_handlers import register_error_handlers
from directory.api.router import api_router
from directory.core.config import settings
from directory.services.employee_service import employee_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService, continuing without DB")
    yield
    await employee_service.close()


app = FastAPI(
    title="Employee Directory API",
    description="CRUD over the employee directory",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)
app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "ok": True,
        "message": "Employee Directory API is running",
        "version": settings.APP_VERSION,
    }


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting Employee Directory API on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
