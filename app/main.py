# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import register_routers
from app.api.errors import register_error_handlers
from app.data.database import init_db, close_db
from app.data.seed import seed_admin
from app.utils.settings import PORT
from app.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    #baza musi odpowiadac zanim zaczniemy przyjmowac requesty
    logger.info("Initializing database...")
    init_db()
    seed_admin()
    logger.info("Storefront API ready")
    yield
    close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)
    register_routers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
