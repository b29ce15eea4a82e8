# task_manager/main.py
import logging

from fastapi import FastAPI
from sqlalchemy import exc as sa_exc

from task_manager.config import settings
from task_manager.core.exceptions import register_exception_handlers
from task_manager.database import AsyncSessionLocal, Base, engine
from task_manager.logging_setup import setup_logging
from task_manager.routers import auth, label, task, task_status, user
from task_manager.services.seed import seed_default_data

# Importing the models registers their tables on Base.metadata
from task_manager.models.user import User  # noqa: F401
from task_manager.models.task_status import TaskStatus  # noqa: F401
from task_manager.models.label import Label  # noqa: F401
from task_manager.models.task import Task  # noqa: F401

logger = logging.getLogger(__name__)


app = FastAPI(title="Task Manager", version="1.0")

register_exception_handlers(app)

# Include Routers
app.include_router(auth.router, prefix="/api")
app.include_router(user.router, prefix="/api")
app.include_router(task_status.router, prefix="/api")
app.include_router(label.router, prefix="/api")
app.include_router(task.router, prefix="/api")

# Create DB Tables (for local runs; use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    setup_logging(settings.LOG_LEVEL, sql_echo=settings.SQL_ECHO)

    # ignore duplicate-object errors from previous partial runs.
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

    if settings.SEED_DEFAULT_DATA:
        async with AsyncSessionLocal() as db:
            await seed_default_data(db)

@app.get("/")
def read_root():
    return {"message": "Welcome to Task Manager"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("task_manager.main:app", host="0.0.0.0", port=8000, reload=True)
