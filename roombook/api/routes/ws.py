import json
from flask import Blueprint, current_app
from simple_websocket import ConnectionClosed
from roombook.extensions import sock
from roombook.models import User
from roombook.schemas import KitchenConnect, parse_payload
from roombook.errors import ValidationError
from roombook.services.notification_hub import get_kitchen_hub

KITCHEN_USER_CONNECT = 'KITCHEN_USER_CONNECT'
CONNECTION_CONFIRMED = 'CONNECTION_CONFIRMED'
CONNECTION_REJECTED = 'CONNECTION_REJECTED'

ws_bp = Blueprint('kitchen_ws', __name__)


def handle_client_message(ws, raw, hub):
    """
    Process one frame from a kitchen client.

    Only ``KITCHEN_USER_CONNECT`` is understood; it registers the
    connection under the worker id. Returns the registered worker id.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        current_app.logger.warning(f"Unparseable websocket message: {raw!r}")
        return None

    if not isinstance(data, dict) or data.get('type') != KITCHEN_USER_CONNECT:
        current_app.logger.debug(f"Ignoring websocket message: {data!r}")
        return None

    try:
        hello = parse_payload(KitchenConnect, data)
    except ValidationError as e:
        current_app.logger.warning(f"Invalid kitchen connect message: {e.details}")
        return None

    user = User.query.get(hello.user_id)
    if not user or not user.is_kitchen:
        ws.send(json.dumps({'type': CONNECTION_REJECTED, 'message': 'Kitchen access required'}))
        return None

    # A socket speaks for one worker for its whole life
    bound_to = hub.worker_for(ws)
    if bound_to is not None and bound_to != user.id:
        current_app.logger.warning(f"Connection of kitchen user {bound_to} tried to identify as {user.id}")
        ws.send(json.dumps({'type': CONNECTION_REJECTED, 'message': 'Connection already identified'}))
        return None

    hub.register(user.id, ws)
    ws.send(json.dumps({'type': CONNECTION_CONFIRMED, 'message': 'Connected to kitchen notifications'}))
    return user.id


@sock.route('/ws', bp=ws_bp)
def kitchen_socket(ws):
    hub = get_kitchen_hub()
    current_app.logger.debug("Websocket connection established")
    try:
        while True:
            raw = ws.receive()
            handle_client_message(ws, raw, hub)
    except ConnectionClosed:
        pass
    finally:
        hub.unregister(ws)
