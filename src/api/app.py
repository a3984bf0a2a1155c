"""FastAPI application for Grammar Cache.

Logging: one JSON object per line on stdout (see src/utils/logging.py).
Set LOG_FORMAT=pretty for development-friendly output.
"""

import sys
from contextlib import asynccontextmanager

# Line-buffer output so container log collectors see lines immediately
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(line_buffering=True)

# Configure structured logging BEFORE importing anything else
from src.utils.logging import configure_logging, get_logger, log  # noqa: E402

configure_logging()

MODULE = "api"
logger = get_logger()

from fastapi import FastAPI  # noqa: E402

from src.api.routes.health import router as health_router  # noqa: E402
from src.api.routes.grammar import router as grammar_router  # noqa: E402
from src.api.routes.admin import router as admin_router  # noqa: E402
from src.db.session import engine as db_engine, async_session  # noqa: E402
from src.db.models import Base  # noqa: E402
from src.engine.decision import DecisionEngine  # noqa: E402
from src.learning.repository import SqlCorrectionRepository, StoreUnavailable  # noqa: E402
from src.learning.seed import GrammarSeeder  # noqa: E402
from src.learning.store import LearnedCorrectionStore  # noqa: E402
from src.llm.oracle import LLMOracle  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown."""
    # Create DB tables if they don't exist
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info(logger, MODULE, "db_ready", "Database tables ready")

    store = LearnedCorrectionStore(SqlCorrectionRepository(async_session))
    try:
        await store.load()
    except StoreUnavailable as e:
        # Requests still work (as cache misses); reads retry the load after a backoff
        log.warning(logger, MODULE, "store_load_failed",
                    "Could not preload learned records", error=str(e))

    app.state.store = store
    app.state.engine = DecisionEngine(store, LLMOracle())
    app.state.seeder = GrammarSeeder(store)
    log.info(logger, MODULE, "ready", "Decision engine ready", records=len(store))

    yield

    # Cleanup
    await app.state.engine.drain()
    await db_engine.dispose()
    log.info(logger, MODULE, "shutdown", "Application shutdown complete")


app = FastAPI(
    title="Grammar Cache",
    description="Pick the grammatically correct sentence, with a learned cache in front of the LLM",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(grammar_router, prefix="/grammar", tags=["grammar"])
app.include_router(admin_router, prefix="/admin/grammar", tags=["admin"])
