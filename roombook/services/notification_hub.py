import json
import logging
import threading

from flask import current_app
from simple_websocket import ConnectionClosed


class KitchenNotificationHub:
    """
    Registry of live websocket connections per kitchen worker.

    One instance is created by ``create_app`` and stored in
    ``app.extensions['kitchen_hub']``. A worker may hold several
    connections at once (one per open tab). Delivery is fire-and-forget:
    closed connections are skipped, nothing is queued or retried.
    """

    def __init__(self, logger=None):
        self._connections = {}  # worker_id -> set of connections
        self._lock = threading.Lock()
        self._closed = False
        self.logger = logger or logging.getLogger(__name__)

    def register(self, worker_id, connection):
        with self._lock:
            if self._closed:
                raise RuntimeError("Notification hub is shut down.")
            self._connections.setdefault(worker_id, set()).add(connection)
        self.logger.info(f"Kitchen user {worker_id} connected")

    def unregister(self, connection):
        """Forget a closed connection. Returns the worker id it belonged to, if any."""
        removed_from = None
        with self._lock:
            for worker_id, conns in list(self._connections.items()):
                if connection in conns:
                    conns.discard(connection)
                    removed_from = worker_id
                    if not conns:
                        del self._connections[worker_id]
        if removed_from is not None:
            self.logger.info(f"Kitchen user {removed_from} disconnected")
        return removed_from

    def worker_for(self, connection):
        """The worker id ``connection`` is registered under, or None."""
        with self._lock:
            for worker_id, conns in self._connections.items():
                if connection in conns:
                    return worker_id
        return None

    def connections_for(self, worker_id):
        with self._lock:
            return list(self._connections.get(worker_id, ()))

    def connected_workers(self):
        with self._lock:
            return list(self._connections.keys())

    def notify(self, worker_id, event):
        """Send ``event`` to every open connection of ``worker_id``. Returns the delivery count."""
        # Iterate over a snapshot so disconnects during fan-out are safe
        connections = self.connections_for(worker_id)
        if not connections:
            self.logger.info(f"No open connection for kitchen user {worker_id}, event {event.get('type')} dropped")
            return 0

        payload = json.dumps(event)
        delivered = 0
        for connection in connections:
            if not getattr(connection, 'connected', False):
                continue
            try:
                connection.send(payload)
                delivered += 1
            except (ConnectionClosed, OSError) as e:
                self.logger.warning(f"Failed to push {event.get('type')} to kitchen user {worker_id}: {e}")
        return delivered

    def shutdown(self):
        with self._lock:
            self._closed = True
            connections = [c for conns in self._connections.values() for c in conns]
            self._connections.clear()
        for connection in connections:
            try:
                connection.close()
            except (ConnectionClosed, OSError) as e:
                self.logger.debug(f"Error closing kitchen connection on shutdown: {e}")


def get_kitchen_hub():
    return current_app.extensions['kitchen_hub']
