import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from farmbooks.core.logging_config import setup_logging
from farmbooks.db.database import create_db_and_tables
from farmbooks.web.routers import bills as bills_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Context manager to prepare logging and the database on startup.
    """
    setup_logging()
    log.info("Creating database tables...")
    create_db_and_tables()
    yield
    log.info("Shutting down...")


app = FastAPI(title="Farm Books Bill Ingestion", lifespan=lifespan)

app.include_router(bills_router.router)


@app.get("/")
def read_root():
    """
    Root endpoint for the application.
    """
    log.info("Root endpoint accessed.")
    return {"message": "Welcome to Farm Books!"}
