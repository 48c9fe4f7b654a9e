"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
or:       python -m api.main   (binds HOST:PORT from the environment)
"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.errors import register_exception_handlers
from api.routes import acoes, alocacoes, clientes
from db import create_db_engine, init_db, make_session_factory
from settings import Settings, settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; release the database connection on shutdown."""
    init_db(app.state.engine)
    logger.info("Database ready at %s", app.state.engine.url.render_as_string(hide_password=True))

    yield

    logger.info("Shutting down, closing database connection")
    app.state.engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own engine and session factory."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Carteira API",
        description="Customers, assets and per-customer asset allocations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = create_db_engine(app_settings.DATABASE_URL, echo=app_settings.SQL_ECHO)
    app.state.session_factory = make_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(clientes.router, prefix="/clientes", tags=["clientes"])
    app.include_router(acoes.router, prefix="/acoes", tags=["acoes"])
    app.include_router(alocacoes.router, tags=["alocacoes"])

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "Carteira API"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def main() -> None:
    """Serve the API until SIGINT/SIGTERM; exit 1 if the server cannot start."""
    logger.info("Starting server on http://%s:%s", settings.HOST, settings.PORT)
    try:
        uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    except Exception:
        logger.exception("Server failed to start")
        sys.exit(1)
    logger.info("Server stopped")


if __name__ == "__main__":
    main()
