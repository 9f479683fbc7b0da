"""Main FastAPI application for the roomchat backend."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends

from roomchat.db.init import init_db
from roomchat.middleware.cors import add_cors_middleware
from roomchat.realtime.room_channel import RoomChannel, get_room_channel
from roomchat.routers import messages_router, realtime_router, rooms_router
from roomchat.settings import LOG_LEVEL, VERSION

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.error(f"[STARTUP] Database initialization failed: {e}")
        raise
    logger.info("[STARTUP] Application startup complete.")
    yield
    logger.info("[SHUTDOWN] Application stopped.")


# Create FastAPI application
app = FastAPI(
    title="roomchat API",
    description="Room-scoped chat messages with private-room access control and live fan-out",
    version=VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
add_cors_middleware(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/health/rooms/{room_id}")
async def room_health(room_id: int, channel: RoomChannel = Depends(get_room_channel)):
    """Number of live subscribers of a room."""
    return {"room_id": room_id, "subscribers": channel.subscriber_count(room_id)}


app.include_router(rooms_router, prefix="/api")  # Room endpoints: /api/rooms
app.include_router(messages_router, prefix="/api")  # Message endpoints: /api/rooms/{room_id}/pesan
app.include_router(realtime_router)  # WebSocket: /ws/rooms/{room_id}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "roomchat.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
