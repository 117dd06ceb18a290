"""
shopcore/notifications/queue.py
-------------------------------
Transient, auto-expiring user messages.

Lifecycle of a notification:  active → (timeout | dismiss) → removed

The queue owns one expiry task per notification. `dismiss` cancels the
task before removing the entry, and both paths treat an id that is
already gone as a no-op, so expiry-after-dismiss and dismiss-after-expiry
are both harmless.

Expiry callbacks run on timer threads, hence the lock.
"""
from __future__ import annotations

import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional


log = logging.getLogger(__name__)

NOTIFICATION_TTL = 5.0   # seconds

SEVERITIES = ('info', 'success', 'warning', 'error')


@dataclass(frozen=True)
class Notification:
    id:         int
    created_at: float
    severity:   str
    message:    str

    def to_dict(self) -> dict:
        return {
            'id':         self.id,
            'created_at': self.created_at,
            'severity':   self.severity,
            'message':    self.message,
        }


class NotificationQueue:
    """
    Args:
        ttl:           seconds before a pushed notification expires
        timer_factory: callable(interval, function, args) returning an
                       object with start() / cancel(); threading.Timer
                       by default
        clock:         timestamp source for `created_at`
        on_idle:       called (outside the lock) whenever expiry or
                       dismissal leaves the queue empty
        ids:           id source; the registry shares one across queues so
                       an id is never reused within the process
    """

    def __init__(self, ttl: float = NOTIFICATION_TTL,
                 timer_factory: Callable = threading.Timer,
                 clock: Callable[[], float] = time.time,
                 on_idle: Optional[Callable[[], None]] = None,
                 ids: Optional[Iterator[int]] = None):
        self.ttl           = ttl
        self.timer_factory = timer_factory
        self.clock         = clock
        self.on_idle       = on_idle
        self._ids          = ids if ids is not None else itertools.count(1)
        self._lock         = threading.Lock()
        self._active:  Dict[int, Notification] = {}
        self._pending: Dict[int, object] = {}

    def push(self, message: str, severity: str = 'info') -> int:
        """Append a notification and schedule its removal. Returns its id."""
        if severity not in SEVERITIES:
            severity = 'info'

        with self._lock:
            nid = next(self._ids)
            self._active[nid] = Notification(nid, self.clock(), severity, str(message))

            timer = self.timer_factory(self.ttl, self._expire, args=(nid,))
            if hasattr(timer, 'daemon'):
                timer.daemon = True
            self._pending[nid] = timer

        timer.start()
        return nid

    def _expire(self, nid: int) -> None:
        with self._lock:
            self._pending.pop(nid, None)
            removed = self._active.pop(nid, None) is not None
            idle = removed and not self._active

        if idle and self.on_idle is not None:
            self.on_idle()

    def dismiss(self, nid: int) -> bool:
        """
        Remove a notification now and cancel its expiry task.
        Returns False when the id is unknown (already expired or dismissed).
        """
        with self._lock:
            timer = self._pending.pop(nid, None)
            removed = self._active.pop(nid, None) is not None
            idle = removed and not self._active

        if timer is not None:
            timer.cancel()
        if idle and self.on_idle is not None:
            self.on_idle()
        return removed

    def active(self) -> List[Notification]:
        """Live notifications, oldest first."""
        with self._lock:
            return sorted(self._active.values(), key=lambda n: n.id)

    def get(self, nid: int) -> Optional[Notification]:
        with self._lock:
            return self._active.get(nid)

    def clear(self) -> None:
        with self._lock:
            timers = list(self._pending.values())
            self._pending.clear()
            self._active.clear()

        for timer in timers:
            timer.cancel()

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)


class QueueRegistry:
    """
    One NotificationQueue per browsing / cashier session, kept in process
    memory. A queue is evicted as soon as its last notification expires or
    is dismissed, so sessions that go quiet cost nothing.

    Pushes go through the registry lock, so a queue is never evicted
    between being looked up and receiving a push.
    """

    def __init__(self, ttl: float = NOTIFICATION_TTL, timer_factory: Callable = threading.Timer):
        self.ttl           = ttl
        self.timer_factory = timer_factory
        self._queues: Dict[str, NotificationQueue] = {}
        self._ids = itertools.count(1)
        # Re-entrant: a timer that fires synchronously evicts from inside push().
        self._lock = threading.RLock()

    def for_session(self, session_id: str) -> NotificationQueue:
        with self._lock:
            queue = self._queues.get(session_id)
            if queue is None:
                queue = NotificationQueue(ttl=self.ttl, timer_factory=self.timer_factory, ids=self._ids)
                queue.on_idle = lambda: self._evict(session_id, queue)
                self._queues[session_id] = queue
                log.debug(f"Notification queue opened for session {session_id}")
            return queue

    def push(self, session_id: str, message: str, severity: str = 'info') -> int:
        with self._lock:
            return self.for_session(session_id).push(message, severity)

    def active(self, session_id: str) -> List[Notification]:
        """Live notifications for the session; never opens a queue."""
        with self._lock:
            queue = self._queues.get(session_id)
        return queue.active() if queue is not None else []

    def dismiss(self, session_id: str, nid: int) -> bool:
        with self._lock:
            queue = self._queues.get(session_id)
        return queue.dismiss(nid) if queue is not None else False

    def _evict(self, session_id: str, queue: NotificationQueue) -> None:
        with self._lock:
            if self._queues.get(session_id) is queue and len(queue) == 0:
                del self._queues[session_id]
                log.debug(f"Notification queue closed for session {session_id}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._queues)
