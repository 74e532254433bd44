"""API entry point

    python api.py
    uvicorn api:app
"""

from contextlib import asynccontextmanager

import uvicorn
from sqlmodel import SQLModel

import src.domain  # noqa: F401
from config import ApplicationConfig
from src.api.app import create_app
from src.depends import engine


@asynccontextmanager
async def lifespan(app):
    # No migration tool is shipped; create missing tables on startup
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await engine.dispose()


app = create_app(ApplicationConfig)
app.router.lifespan_context = lifespan

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=True,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
