import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errors import register_error_handlers
from app.core.logging_setup import setup_logging
from app.routers import health, auth, tasks

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)
    database = database or Database(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Ouvre le store au démarrage, le ferme à l'arrêt
        database.connect()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title="Todo App API",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.database = database

    allow_all = settings.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/")
    def root():
        return {"success": True, "message": "Todo App API is running!"}

    # Routes
    app.include_router(health.router, prefix="/health")
    app.include_router(auth.router)
    app.include_router(tasks.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=default_settings.PORT)
