"""
Kitchen worker side of the notification channel.

Connects to the server websocket, identifies the worker, surfaces each new
kitchen order once and reconnects after a fixed delay when the connection
drops, as long as the worker still holds the kitchen role.
"""
import argparse
import json
import logging
import threading
from collections import OrderedDict

import simple_websocket
from simple_websocket import ConnectionClosed

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 3.0
DEFAULT_DEDUP_SIZE = 50


class KitchenClient:

    def __init__(self, url, user_id, is_kitchen=None, on_order=None,
                 reconnect_delay=DEFAULT_RECONNECT_DELAY, dedup_size=DEFAULT_DEDUP_SIZE,
                 connect=None):
        self.url = url
        self.user_id = user_id
        # Role is re-checked before every reconnect; it may be revoked meanwhile
        self.is_kitchen = is_kitchen or (lambda: True)
        self.on_order = on_order
        self.reconnect_delay = reconnect_delay
        self.dedup_size = dedup_size
        self._connect = connect or simple_websocket.Client.connect

        self.ws = None
        self.connected = False
        self._connecting = False
        self._stopped = False
        self._reconnect_timer = None
        self._reader = None
        self._seen_orders = OrderedDict()
        self._lock = threading.Lock()

    def connect(self):
        """Open the connection and identify as a kitchen worker. Returns True on success."""
        with self._lock:
            if self._connecting or self.connected or not self.is_kitchen():
                return False
            self._connecting = True
            self._stopped = False
            self._cancel_reconnect()

        try:
            ws = self._connect(self.url)
            ws.send(json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': self.user_id}))
        except (simple_websocket.ConnectionError, ConnectionClosed, OSError) as e:
            logger.error(f"Failed to connect to {self.url}: {e}")
            with self._lock:
                self._connecting = False
            self._schedule_reconnect()
            return False

        with self._lock:
            self.ws = ws
            self.connected = True
            self._connecting = False

        logger.info(f"Kitchen websocket connected as user {self.user_id}")
        self._reader = threading.Thread(target=self._read_loop, args=(ws,), daemon=True)
        self._reader.start()
        return True

    def _read_loop(self, ws):
        try:
            while True:
                raw = ws.receive()
                try:
                    self.handle_message(raw)
                except Exception:
                    # A bad frame or a failing callback must not kill the reader
                    logger.exception("Error handling kitchen websocket message")
        except (ConnectionClosed, OSError):
            logger.info("Kitchen websocket disconnected")
        finally:
            self._on_disconnect(ws)

    def handle_message(self, raw):
        """Process one server frame. Returns the order event if it is new, else None."""
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            logger.error(f"Error parsing websocket message: {raw!r}")
            return None

        if not isinstance(message, dict) or message.get('type') != 'NEW_KITCHEN_ORDER':
            logger.debug(f"System message: {message}")
            return None

        order_id = (message.get('order') or {}).get('id')
        if self._already_seen(order_id):
            logger.debug(f"Duplicate notification for order {order_id} ignored")
            return None

        if self.on_order:
            self.on_order(message)
        return message

    def _already_seen(self, order_id):
        """Remember order ids in a bounded LRU; True if ``order_id`` was delivered before."""
        if order_id is None:
            return False
        with self._lock:
            if order_id in self._seen_orders:
                self._seen_orders.move_to_end(order_id)
                return True
            self._seen_orders[order_id] = True
            while len(self._seen_orders) > self.dedup_size:
                self._seen_orders.popitem(last=False)
        return False

    def _on_disconnect(self, ws):
        with self._lock:
            if self.ws is ws:
                self.ws = None
                self.connected = False
            stopped = self._stopped
        try:
            ws.close()
        except (ConnectionClosed, OSError) as e:
            logger.debug(f"Kitchen websocket already closed: {e}")
        if not stopped:
            self._schedule_reconnect()

    def _schedule_reconnect(self):
        with self._lock:
            if self._stopped or not self.is_kitchen():
                return
            self._cancel_reconnect()
            timer = threading.Timer(self.reconnect_delay, self._reconnect)
            timer.daemon = True
            self._reconnect_timer = timer
        timer.start()

    def _cancel_reconnect(self):
        # Caller holds self._lock
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    def _reconnect(self):
        with self._lock:
            self._reconnect_timer = None
        if self.is_kitchen():
            logger.info("Attempting to reconnect kitchen websocket...")
            self.connect()

    def disconnect(self):
        with self._lock:
            self._stopped = True
            self._cancel_reconnect()
            ws = self.ws
            self.ws = None
            self.connected = False
        if ws is not None:
            ws.close()


def main():
    parser = argparse.ArgumentParser(description="Listen for kitchen orders.")
    parser.add_argument('--url', default='ws://localhost:5000/ws')
    parser.add_argument('--user-id', type=int, required=True)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    def print_order(event):
        booking = event.get('booking', {})
        print(f"{event.get('message')}: {booking.get('title')} "
              f"{booking.get('date')} {booking.get('startTime')}-{booking.get('endTime')}")

    client = KitchenClient(args.url, args.user_id, on_order=print_order)
    client.connect()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        client.disconnect()


if __name__ == '__main__':
    main()
