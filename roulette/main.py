# main.py - FastAPI shell around the matchmaking core
import asyncio

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from roulette import config
from roulette.errors import MatchmakingError
from roulette.logging_config import get_logger, setup_logging
from roulette.packet_router import PacketRouter
from roulette.schemas import HealthResponse
from roulette.session_manager import SessionManager

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Roulette signaling server")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    session_manager = SessionManager()
    router = PacketRouter(session_manager.controller)
    app.state.session_manager = session_manager

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(status="ok", **session_manager.controller.stats())

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        session_id = session_manager.connect()
        writer = asyncio.create_task(session_manager.pump(session_id, websocket))

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                if message.get("text") is not None:
                    reply = router.route(session_id, message["text"])
                else:
                    logger.debug(f"Binary frame from {session_id}")
                    reply = {"type": "error", "message": "binary frames are not supported"}
                if reply is not None:
                    session_manager.send(session_id, reply)
        except WebSocketDisconnect:
            logger.debug(f"WebSocket closed for {session_id}")
        except MatchmakingError:
            logger.error(f"Lifecycle error on {session_id}, closing connection", exc_info=True)
            await websocket.close(code=1011)
        except Exception as e:
            logger.error(f"WebSocket error for {session_id}: {e}", exc_info=True)
        finally:
            session_manager.disconnect(session_id)
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass

    return app


setup_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting signaling server on {config.HOST}:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
