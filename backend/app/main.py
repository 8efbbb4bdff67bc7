from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .api.sessions import router as sessions_router
from .api.websocket import router as ws_router
from .core.config import get_settings
from .core.session_store import SessionStore
from .core.timer_manager import TimerManager
from .services.recipe_catalog import RecipeCatalog

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One store per process; handed to routes through app.state
    app.state.store = SessionStore(carry_subsecond_remainder=settings.carry_subsecond_remainder)
    app.state.catalog = RecipeCatalog()
    app.state.timers = TimerManager(app.state.store)
    yield
    await app.state.timers.cancel_all()


app = FastAPI(title="simmer", version="0.1.0", description="Guided cooking session timer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions_router)
app.include_router(ws_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "message": "simmer API is running", "active_recipe_id": app.state.store.active_recipe_id}
