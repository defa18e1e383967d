import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.clients.base_realtime_client import BaseRealtimeClient
from app.clients.http_realtime_client import HttpRealtimeClient
from app.config import (
    APP_ADDR,
    APP_PORT,
    COMMIT_HASH,
    ENV,
    LOG_LEVEL,
    OUTBOX_BATCH_SIZE,
    OUTBOX_CLAIM_SECONDS,
    OUTBOX_DISPATCHER_ENABLED,
    OUTBOX_MAX_ATTEMPTS,
    OUTBOX_POLL_INTERVAL_SECONDS,
    REALTIME_GATEWAY_API_KEY,
    REALTIME_GATEWAY_URL,
)
from app.database import AsyncSessionLocal, close_db, get_db, init_db
from app.exceptions import MessagingServiceError
from app.routers.conversations import router as conversations_router
from app.routers.messages import router as messages_router
from app.routers.notifications import router as notifications_router
from app.routers.users import router as users_router
from app.services.outbox_dispatcher import OutboxDispatcher

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("app")


def build_realtime_client() -> Optional[BaseRealtimeClient]:
    """Live delivery is enabled only when a gateway is configured."""
    if not REALTIME_GATEWAY_URL:
        return None
    return HttpRealtimeClient(
        base_url=REALTIME_GATEWAY_URL, api_key=REALTIME_GATEWAY_API_KEY
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown."""
    # Startup
    await init_db()
    dispatcher = None
    dispatcher_task = None
    if OUTBOX_DISPATCHER_ENABLED:
        dispatcher = OutboxDispatcher(
            AsyncSessionLocal,
            realtime_client=build_realtime_client(),
            batch_size=OUTBOX_BATCH_SIZE,
            max_attempts=OUTBOX_MAX_ATTEMPTS,
            claim_seconds=OUTBOX_CLAIM_SECONDS,
            poll_interval=OUTBOX_POLL_INTERVAL_SECONDS,
        )
        dispatcher_task = asyncio.create_task(dispatcher.run())
    yield
    # Shutdown
    if dispatcher is not None and dispatcher_task is not None:
        dispatcher.stop()
        await dispatcher_task
    await close_db()


app = FastAPI(
    title="Messaging Service",
    description="Conversations, messages and notifications API",
    version=COMMIT_HASH or "dev",
    lifespan=lifespan,
)

# Include routers
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(
    conversations_router, prefix="/api/conversations", tags=["conversations"]
)
app.include_router(messages_router, prefix="/api/messages", tags=["messages"])
app.include_router(
    notifications_router, prefix="/api/notifications", tags=["notifications"]
)


@app.exception_handler(MessagingServiceError)
async def messaging_error_handler(
    request: Request, exc: MessagingServiceError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": str(exc)},
    )


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Optional[str]]:
    """Health check endpoint with database connectivity."""
    try:
        # Test database connection
        result = await db.execute(text("SELECT 1"))
        db_status = "connected" if result.scalar() == 1 else "error"
    except Exception:
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": ENV,
        "version": COMMIT_HASH,
    }


# If run directly, start the server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=APP_ADDR, port=APP_PORT)
