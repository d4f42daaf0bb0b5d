from collections import deque
from typing import Deque, List

from roulette.errors import AlreadyWaiting, PoolEmpty


class WaitingPool:
    """FIFO of session ids looking for a partner."""

    def __init__(self):
        self._queue: Deque[str] = deque()

    def enqueue(self, session_id: str) -> None:
        if session_id in self._queue:
            raise AlreadyWaiting(session_id)
        self._queue.append(session_id)

    def dequeue_one(self) -> str:
        if not self._queue:
            raise PoolEmpty()
        return self._queue.popleft()

    def remove(self, session_id: str) -> None:
        try:
            self._queue.remove(session_id)
        except ValueError:
            pass

    def snapshot(self) -> List[str]:
        return list(self._queue)

    def __contains__(self, session_id):
        return session_id in self._queue

    def __len__(self):
        return len(self._queue)
