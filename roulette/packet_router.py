import json
from typing import Optional

from pydantic import ValidationError

from roulette.lifecycle import LifecycleController
from roulette.logging_config import get_logger
from roulette.schemas import (
    AnswerMessage,
    IceMessage,
    JoinMessage,
    OfferMessage,
    PingMessage,
    SkipMessage,
    inbound_adapter,
)

logger = get_logger(__name__)


class PacketRouter:
    """Turns one inbound frame into one controller call.

    Returns a message to send straight back to the sender (``pong`` or
    ``error``), or ``None`` when the controller already queued whatever
    needed to go out.
    """

    def __init__(self, controller: LifecycleController):
        self.controller = controller

    def route(self, session_id: str, raw: str) -> Optional[dict]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug(f"Non-JSON frame from {session_id}")
            return {"type": "error", "message": "invalid JSON"}

        try:
            message = inbound_adapter.validate_python(data)
        except ValidationError as e:
            logger.debug(f"Rejected frame from {session_id}: {e.error_count()} errors")
            msg_type = data.get("type") if isinstance(data, dict) else None
            return {"type": "error", "message": f"invalid message: {msg_type!r}"}

        if isinstance(message, PingMessage):
            return {"type": "pong"}
        if isinstance(message, JoinMessage):
            self.controller.join(session_id)
        elif isinstance(message, SkipMessage):
            self.controller.skip(session_id)
        elif isinstance(message, OfferMessage):
            self.controller.relay(session_id, message.room, message.type, message.offer)
        elif isinstance(message, AnswerMessage):
            self.controller.relay(session_id, message.room, message.type, message.answer)
        elif isinstance(message, IceMessage):
            self.controller.relay(session_id, message.room, message.type, message.candidate)
        return None
