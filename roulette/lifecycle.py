import threading
import time
from typing import Any, Optional

from roulette.errors import DuplicateSession, PoolEmpty, UnknownSession
from roulette.logging_config import get_logger
from roulette.models import Room, Session, SessionState
from roulette.registry import ConnectionRegistry
from roulette.room_table import RoomTable
from roulette.signal_relay import Notifier, SignalRelay
from roulette.waiting_pool import WaitingPool

logger = get_logger(__name__)


class LifecycleController:
    """Owns the registry, the waiting pool and the room table.

    Every public method runs under one lock, so dequeueing a partner and
    creating the room happen as a single step relative to any other join,
    skip, disconnect or relay. ``notify`` is called while the lock is held and
    must not block.
    """

    def __init__(self, notify: Notifier):
        self.notify = notify
        self.registry = ConnectionRegistry()
        self.pool = WaitingPool()
        self.rooms = RoomTable()
        self.signals = SignalRelay(self.rooms, notify)
        self._lock = threading.RLock()

    def connect(self, session_id: str) -> Session:
        with self._lock:
            try:
                session = self.registry.register(session_id)
            except DuplicateSession:
                logger.error(f"Refusing duplicate registration of {session_id}")
                raise
            logger.info(f"User connected: {session_id}")
            return session

    def join(self, session_id: str) -> Optional[Room]:
        """Leave the current room (if any) and look for a new partner.

        Returns the new room, or ``None`` if the session was put in the
        waiting pool or was already there.
        """
        with self._lock:
            session = self._session(session_id)
            if session.state is SessionState.WAITING:
                logger.debug(f"{session_id} is already waiting, ignoring join")
                return None
            self._leave_room(session)
            return self._match(session)

    def skip(self, session_id: str) -> Optional[Room]:
        with self._lock:
            session = self._session(session_id)
            if session.state is SessionState.WAITING:
                logger.debug(f"{session_id} skipped while waiting, nothing to do")
                return None
            former = self._leave_room(session)
            if former:
                logger.info(f"{session_id} skipped {former}")
            return self._match(session)

    def disconnect(self, session_id: str) -> None:
        with self._lock:
            session = self.registry.sessions.get(session_id)
            if session is None:
                logger.debug(f"Disconnect for unknown session {session_id}, ignoring")
                return
            self.pool.remove(session_id)
            self._leave_room(session)
            self.registry.unregister(session_id)
            logger.info(f"User disconnected: {session_id}")

    def relay(self, sender_id: str, room_id: str, kind: str, payload: Any) -> bool:
        with self._lock:
            self._session(sender_id)
            return self.signals.relay(sender_id, room_id, kind, payload)

    def state_of(self, session_id: str) -> Optional[SessionState]:
        with self._lock:
            session = self.registry.sessions.get(session_id)
            return session.state if session else None

    def stats(self) -> dict:
        with self._lock:
            oldest = min((s.connected_at for s in self.registry.sessions.values()), default=None)
            return {
                "sessions": len(self.registry),
                "waiting": len(self.pool),
                "rooms": len(self.rooms),
                "oldest_session_age": round(time.time() - oldest, 3) if oldest is not None else 0.0,
            }

    # ------------------------------------------------------------------
    # Internals, always called with the lock held
    # ------------------------------------------------------------------

    def _session(self, session_id: str) -> Session:
        try:
            return self.registry.get(session_id)
        except UnknownSession:
            logger.error(f"Lifecycle event for unregistered session {session_id}")
            raise

    def _leave_room(self, session: Session) -> Optional[str]:
        partner_id = self.rooms.dissolve(session.id)
        session.state = SessionState.IDLE
        session.room_id = None
        if partner_id is None:
            return None

        partner = self.registry.get(partner_id)
        partner.state = SessionState.IDLE
        partner.room_id = None
        self.notify(partner_id, "partnerLeft", {})
        return partner_id

    def _match(self, session: Session) -> Optional[Room]:
        try:
            partner_id = self.pool.dequeue_one()
        except PoolEmpty:
            self.pool.enqueue(session.id)
            session.state = SessionState.WAITING
            logger.debug(f"{session.id} is waiting for a partner")
            return None

        room = self.rooms.create_room(partner_id, session.id)
        partner = self.registry.get(partner_id)
        for member in (partner, session):
            member.state = SessionState.PAIRED
            member.room_id = room.id

        self.notify(partner_id, "paired", {"room": room.id, "isInitiator": False})
        self.notify(session.id, "paired", {"room": room.id, "isInitiator": True})
        logger.info(f"Paired {partner_id} with {session.id} in {room.id}")
        return room
