class MatchmakingError(Exception):
    """Base class for lifecycle invariant violations.

    These point at a bug in the caller (a registry/lifecycle mixup), never at
    a normal race between two clients.
    """


class UnknownSession(MatchmakingError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id!r} is not registered")
        self.session_id = session_id


class DuplicateSession(MatchmakingError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id!r} is already registered")
        self.session_id = session_id


class AlreadyWaiting(MatchmakingError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id!r} is already in the waiting pool")
        self.session_id = session_id


class AlreadyPaired(MatchmakingError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id!r} already belongs to a room")
        self.session_id = session_id


class PoolEmpty(LookupError):
    """Nobody is waiting for a partner."""
