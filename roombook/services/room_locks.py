import threading
from contextlib import contextmanager

from flask import current_app


class RoomDayLocks:
    """
    Per-(room, date) locks that serialise conflict check and write inside
    this process. Multi-process deployments still rely on the database.

    One instance is created by ``create_app`` and stored in
    ``app.extensions['room_day_locks']``. An entry only lives while some
    thread holds or waits for it.
    """

    def __init__(self):
        self._locks = {}  # (room_id, date) -> [lock, users]
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, room_id, date):
        key = (room_id, date)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


def get_room_day_locks():
    return current_app.extensions['room_day_locks']
