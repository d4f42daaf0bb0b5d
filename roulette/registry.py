from typing import Dict

from roulette.errors import DuplicateSession, UnknownSession
from roulette.models import Session


class ConnectionRegistry:
    def __init__(self):
        self.sessions: Dict[str, Session] = {}

    def register(self, session_id: str) -> Session:
        if session_id in self.sessions:
            raise DuplicateSession(session_id)
        session = Session(session_id)
        self.sessions[session_id] = session
        return session

    def unregister(self, session_id: str) -> None:
        # Unknown ids are fine: duplicate close signals end up here twice.
        self.sessions.pop(session_id, None)

    def exists(self, session_id: str) -> bool:
        return session_id in self.sessions

    def get(self, session_id: str) -> Session:
        session = self.sessions.get(session_id)
        if session is None:
            raise UnknownSession(session_id)
        return session

    def __contains__(self, session_id):
        return session_id in self.sessions

    def __len__(self):
        return len(self.sessions)
