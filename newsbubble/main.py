# newsbubble/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os

from .logging_setup import setup_logging, get_logger
from .middleware import RequestContextMiddleware
from .exception_handling import register_exception_handlers
from .lifespan import lifespan

from .routers import health, recommendations, profile, sections, clicks, saved, admin

# before the routers' first log line and the scheduler's first run
setup_logging()
logger = get_logger("newsbubble.main")

app = FastAPI(title="News Bubble", version="0.1.0", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)

# The reader UI is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-user-id"],
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(recommendations.router)
app.include_router(profile.router)
app.include_router(sections.router)
app.include_router(clicks.router)
app.include_router(saved.router)
app.include_router(admin.router)
