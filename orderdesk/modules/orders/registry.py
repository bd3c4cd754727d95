import threading
import time
import uuid
from collections import OrderedDict

from .state import ViewState

DEFAULT_MAX_SESSIONS = 500


class _Entry:
    __slots__ = ('state', 'lock', 'touched')

    def __init__(self, state, touched):
        self.state = state
        self.lock = threading.Lock()
        self.touched = touched


class ViewStateRegistry:
    """Process-local view state per admin session, keyed by a random token.

    Nothing here is persisted; a restart starts every session from an empty,
    not-yet-loaded state. Entries idle longer than ``max_idle`` seconds are
    dropped, and past ``max_entries`` the least recently used go first.

    Changes go through ``update`` so the read, the operation and the write
    for one session happen under that session's lock.
    """

    def __init__(self, max_idle=None, max_entries=DEFAULT_MAX_SESSIONS, clock=time.monotonic):
        self.max_idle = max_idle
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries = OrderedDict()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    @staticmethod
    def new_token():
        return uuid.uuid4().hex

    def get(self, token):
        """Current state for a token without creating an entry"""
        with self._lock:
            self._evict()
            entry = self._entries.get(token)
            if entry is None:
                return ViewState()
            self._touch(token, entry)
            return entry.state

    def update(self, token, operation):
        """Run ``operation(state)`` under the token's lock and keep the outcome's state.

        The operation returns an Outcome; it is passed back to the caller.
        """
        with self._lock:
            self._evict()
            entry = self._entries.get(token)
            if entry is None:
                entry = _Entry(ViewState(), self._clock())
                self._entries[token] = entry
            self._touch(token, entry)
            self._evict_overflow()

        with entry.lock:
            outcome = operation(entry.state)
            entry.state = outcome.state

        with self._lock:
            if self._entries.get(token) is entry:
                self._touch(token, entry)
        return outcome

    def discard(self, token):
        with self._lock:
            self._entries.pop(token, None)

    # Callers hold self._lock

    def _touch(self, token, entry):
        entry.touched = self._clock()
        self._entries.move_to_end(token)

    def _evict(self):
        if self.max_idle is None:
            return
        now = self._clock()
        # Least recently used first, so stop at the first fresh entry
        while self._entries:
            token, entry = next(iter(self._entries.items()))
            if now - entry.touched <= self.max_idle:
                break
            del self._entries[token]

    def _evict_overflow(self):
        while self.max_entries and len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
