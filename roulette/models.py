import time
from enum import Enum
from typing import Optional, Tuple


class SessionState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    PAIRED = "paired"


class Session:
    def __init__(self, session_id: str):
        self.id = session_id
        self.state = SessionState.IDLE
        self.room_id: Optional[str] = None
        self.connected_at = time.time()

    def __repr__(self):
        return f"<Session {self.id} {self.state.value} room={self.room_id}>"


class Room:
    """Two sessions matched together.

    ``members`` is ordered ``(waiting, arriving)``; the arriving member is the
    initiator and starts the handshake.
    """

    def __init__(self, room_id: str, waiting: str, arriving: str):
        self.id = room_id
        self.members: Tuple[str, str] = (waiting, arriving)
        self.initiator = arriving

    def other(self, session_id: str) -> Optional[str]:
        a, b = self.members
        if session_id == a:
            return b
        if session_id == b:
            return a
        return None

    def __repr__(self):
        return f"<Room {self.id} members={self.members}>"
