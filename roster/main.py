# roster/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import exc as sa_exc

from roster.config import settings
from roster.database import engine, AsyncSessionLocal, Base
from roster.logger import setup_logging
from roster import models  # noqa: F401  registers every table on Base.metadata
from roster.routers import auth, drivers, evaluation_items, evaluations, users, registration, reports
from roster.routers import settings as settings_router
from roster.services.change_feed import ChangeFeed
from roster.services.drafts import FileDraftStore
from roster.services.settings_store import SettingsRegistry, SqlSettingsBackend

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


app = FastAPI(title="Fleet Roster - Driver Management Console", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single owners of the long-lived services
app.state.session_factory = AsyncSessionLocal
app.state.change_feed = ChangeFeed()
app.state.draft_store = FileDraftStore(settings.REGISTRATION_DRAFT_DIR)
app.state.settings_registry = SettingsRegistry(
    SqlSettingsBackend(AsyncSessionLocal),
    delay=settings.SETTINGS_SAVE_DELAY,
)

# Include Routers
app.include_router(auth.router)
app.include_router(drivers.router)
app.include_router(evaluation_items.router)
app.include_router(evaluations.router)
app.include_router(users.router)
app.include_router(registration.router)
app.include_router(settings_router.router)
app.include_router(reports.router)


# Create DB tables for local runs; deployments apply the Alembic migrations
@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise


@app.on_event("shutdown")
async def shutdown_event():
    # Pending debounced preference writes must not be lost on exit
    await app.state.settings_registry.aclose()
    await engine.dispose()


@app.get("/")
def read_root():
    return {"message": "Welcome to the Fleet Roster backend"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("roster.main:app", host="0.0.0.0", port=8000, reload=True)
