import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from careermatch.config import settings
from careermatch.db import init_db, is_sqlite
from careermatch.logging_setup import configure_logging
from careermatch.routers import competencies, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    if is_sqlite:
        init_db()
    logger.info("%s started (env=%s, match_limit_mode=%s)", settings.app_name, settings.app_env, settings.match_limit_mode)

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(competencies.router, prefix="/api")
