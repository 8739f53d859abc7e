# core/request_guard.py

"""
Re-entrancy and ordering guards for console actions.

- InFlightGuard: a mutating action (grant, revoke, create, delete) may have
  at most one execution in flight per key; a second submission is rejected.
- LatestRequestTracker: reads keyed by caller; when a newer read starts,
  results of older ones are discarded ("last request wins").
"""

from contextlib import contextmanager
from itertools import count
from threading import Lock
from typing import Dict, Hashable, Set

from core.errors import DuplicateSubmission
from core.logging_config import logger


class SupersededRequest(Exception):
    """A newer request for the same key started before this one finished."""


class InFlightGuard:
    def __init__(self):
        self._in_flight: Set[Hashable] = set()
        self._lock = Lock()

    @contextmanager
    def hold(self, key: Hashable):
        with self._lock:
            if key in self._in_flight:
                logger.info(f"Duplicate submission rejected: {key}")
                raise DuplicateSubmission("This action is already in progress")
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(key)

    def is_busy(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._in_flight


class LatestRequestTracker:
    def __init__(self):
        self._latest: Dict[Hashable, int] = {}
        self._tokens = count(1)
        self._lock = Lock()

    def begin(self, key: Hashable) -> int:
        with self._lock:
            token = next(self._tokens)
            self._latest[key] = token
            return token

    def is_current(self, key: Hashable, token: int) -> bool:
        with self._lock:
            return self._latest.get(key) == token

    def forget(self, key: Hashable, token: int) -> bool:
        """Drop `key` if `token` is still its newest request."""
        with self._lock:
            if self._latest.get(key) != token:
                return False
            del self._latest[key]
            return True

    def finish(self, key: Hashable, token: int, result):
        """Return `result` if `token` is still the newest for `key`."""
        if not self.forget(key, token):
            logger.debug(f"Discarding superseded result for {key} (token {token})")
            raise SupersededRequest(str(key))
        return result

    def __len__(self) -> int:
        with self._lock:
            return len(self._latest)
