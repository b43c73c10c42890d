import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .catalog_routes import router as catalog_router
from .config import Settings, get_settings
from .db.session import get_engine
from .logging_config import configure_logging
from .plan_routes import router as plan_router
from .planner_routes import router as planner_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Lesson Plan Constructor", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(catalog_router)
app.include_router(plan_router)
app.include_router(planner_router)

settings_snapshot = get_settings()
logger.info("Backend starting with database configured: %s", bool(settings_snapshot.database_url))
logger.info("Lesson budget: %ss", settings_snapshot.lesson_duration_seconds)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "lesson_duration_seconds": settings.lesson_duration_seconds,
        "default_start_time": settings.default_start_time,
    }


@app.get("/healthz/database")
def database_health() -> Dict[str, Any]:
    try:
        engine = get_engine()
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Database health check failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"status": "ok", "dialect": engine.dialect.name}
