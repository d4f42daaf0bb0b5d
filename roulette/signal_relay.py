from typing import Any, Callable

from roulette.logging_config import get_logger
from roulette.room_table import RoomTable

logger = get_logger(__name__)

# outbound event type -> name of the field carrying the opaque payload
SIGNAL_FIELDS = {
    "signal.offer": "offer",
    "signal.answer": "answer",
    "signal.ice": "candidate",
}

Notifier = Callable[[str, str, dict], None]


class SignalRelay:
    def __init__(self, rooms: RoomTable, notify: Notifier):
        self.rooms = rooms
        self.notify = notify

    def relay(self, sender_id: str, room_id: str, kind: str, payload: Any) -> bool:
        """Forward ``payload`` to the sender's partner if ``room_id`` is still current.

        A room id that does not match the sender's room means the room was
        dissolved under the message; it is dropped without telling anyone.
        """
        field = SIGNAL_FIELDS.get(kind)
        if field is None:
            raise ValueError(f"not a signal event: {kind!r}")

        current = self.rooms.room_of(sender_id)
        if current is None or current != room_id:
            logger.debug(f"Dropped stale {kind} from {sender_id} (room {room_id}, current {current})")
            return False

        partner = self.rooms.partner_of(sender_id)
        self.notify(partner, kind, {field: payload})
        logger.debug(f"[{room_id}] Relayed {kind} {sender_id} -> {partner}")
        return True
