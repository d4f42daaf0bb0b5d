import asyncio
import uuid
from typing import Dict, Tuple

from fastapi import WebSocket

from roulette.lifecycle import LifecycleController
from roulette.logging_config import get_logger

logger = get_logger(__name__)


class SessionManager:
    """Binds websocket connections to session ids.

    Each connection gets an outbound queue bound to the event loop that
    accepted it. The controller's notifier hands messages to that loop with
    ``call_soon_threadsafe`` and :meth:`pump` drains the queue to the socket,
    so nothing awaits while the controller holds its lock, whichever loop or
    thread the notification comes from. Messages reach a queue in the order
    they were sent, which is the controller's lock order.
    """

    def __init__(self):
        self.outboxes: Dict[str, Tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = {}
        self.controller = LifecycleController(self.notify)

    def connect(self) -> str:
        """Register a new session; must be called from the connection's loop."""
        session_id = uuid.uuid4().hex
        self.outboxes[session_id] = (asyncio.get_running_loop(), asyncio.Queue())
        self.controller.connect(session_id)
        self.send(session_id, {"type": "welcome", "id": session_id})
        return session_id

    def notify(self, session_id: str, event: str, payload: dict) -> None:
        self.send(session_id, {"type": event, **payload})

    def send(self, session_id: str, message: dict) -> None:
        entry = self.outboxes.get(session_id)
        if entry is None:
            logger.debug(f"No outbox for {session_id}, dropping {message.get('type')}")
            return
        loop, outbox = entry
        try:
            loop.call_soon_threadsafe(outbox.put_nowait, message)
        except RuntimeError:
            # loop already closed, the connection is on its way out
            logger.debug(f"Loop closed for {session_id}, dropping {message.get('type')}")

    async def pump(self, session_id: str, ws: WebSocket) -> None:
        _, outbox = self.outboxes[session_id]
        while True:
            message = await outbox.get()
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to deliver {message.get('type')} to {session_id}: {e}")
                return

    def disconnect(self, session_id: str) -> None:
        self.controller.disconnect(session_id)
        self.outboxes.pop(session_id, None)
