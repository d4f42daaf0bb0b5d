from typing import Dict, Optional

from roulette.errors import AlreadyPaired
from roulette.logging_config import get_logger
from roulette.models import Room

logger = get_logger(__name__)


def make_room_id(waiting: str, arriving: str) -> str:
    return f"room_{waiting}_{arriving}"


class RoomTable:
    """Both directions of room membership, kept in step.

    ``by_session`` maps a session id to its room id and ``rooms`` maps a room
    id to the :class:`Room`. Every member of a room in ``rooms`` appears in
    ``by_session`` and nothing else does.
    """

    def __init__(self):
        self.rooms: Dict[str, Room] = {}
        self.by_session: Dict[str, str] = {}

    def create_room(self, waiting: str, arriving: str) -> Room:
        """Pair ``waiting`` (non-initiator) with ``arriving`` (initiator)."""
        if waiting == arriving:
            raise ValueError(f"cannot pair session {waiting!r} with itself")
        for session_id in (waiting, arriving):
            if session_id in self.by_session:
                raise AlreadyPaired(session_id)

        room = Room(make_room_id(waiting, arriving), waiting, arriving)
        self.rooms[room.id] = room
        self.by_session[waiting] = room.id
        self.by_session[arriving] = room.id
        logger.debug(f"Room {room.id} created")
        return room

    def room_of(self, session_id: str) -> Optional[str]:
        return self.by_session.get(session_id)

    def partner_of(self, session_id: str) -> Optional[str]:
        room_id = self.by_session.get(session_id)
        if room_id is None:
            return None
        return self.rooms[room_id].other(session_id)

    def dissolve(self, session_id: str) -> Optional[str]:
        """Drop ``session_id``'s room and return the partner left behind.

        Returns ``None`` when the session has no room, so repeated calls are
        harmless.
        """
        room_id = self.by_session.pop(session_id, None)
        if room_id is None:
            return None
        room = self.rooms.pop(room_id)
        partner = room.other(session_id)
        self.by_session.pop(partner, None)
        logger.debug(f"Room {room_id} dissolved by {session_id}")
        return partner

    def get(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def __contains__(self, room_id):
        return room_id in self.rooms

    def __len__(self):
        return len(self.rooms)
