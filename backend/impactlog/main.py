import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from impactlog.api.wins import router as wins_router
from impactlog.api.reflections import router as reflections_router
from impactlog.api.profile import router as profile_router
from impactlog.api.dashboard import router as dashboard_router
from impactlog.api.assist import router as assist_router
from impactlog.db import Base, engine
from impactlog.models.win import WinRecord  # noqa: F401  (import ensures table is registered)
from impactlog.models.reflection import ReflectionRecord  # noqa: F401
from impactlog.models.profile import ProfileRecord  # noqa: F401
from impactlog.core.config import settings
from impactlog.core.constants import APP_NAME

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


app = FastAPI(title=APP_NAME)

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (wins, reflections, profiles) on startup
Base.metadata.create_all(bind=engine)

# Ensure the guests' local medium exists
os.makedirs(settings.local_storage_dir, exist_ok=True)

app.include_router(wins_router)
app.include_router(reflections_router)
app.include_router(profile_router)
app.include_router(dashboard_router)
app.include_router(assist_router)

if not settings.privileged_email:
    logger.info("No privileged email configured; every session uses local storage")


@app.get("/")
def root():
    return {"message": f"{APP_NAME} backend is running"}
