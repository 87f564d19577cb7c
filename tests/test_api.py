import json
from unittest.mock import MagicMock
from roombook import db
from roombook.models import KitchenOrder, Room
from roombook.api.routes.ws import handle_client_message
from roombook.services.notification_hub import get_kitchen_hub
from tests.conftest import DAY

def _payload(room, start, end, **extra):
    data = {'title': 'Sprint review', 'roomId': room.id, 'date': DAY, 'startTime': start, 'endTime': end}
    data.update(extra)
    return data

def test_login_returns_token_and_roles(client, init_data):
    resp = client.post('/api/auth/login', json={'username': 'cozinha', 'password': 'secret1'})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['token']
    assert body['isKitchen'] is True
    assert body['isAdmin'] is False

    resp = client.post('/api/auth/login', json={'username': 'cozinha', 'password': 'wrong'})
    assert resp.status_code == 401

def test_register_and_me(client, init_data):
    resp = client.post('/api/auth/register', json={
        'username': 'carla', 'password': 'secret1', 'fullName': 'Carla', 'position': 'PM', 'email': 'carla@test.com'
    })
    assert resp.status_code == 201
    token = resp.get_json()['token']

    me = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.get_json()['username'] == 'carla'
    assert 'password_hash' not in me.get_json()

    dup = client.post('/api/auth/register', json={
        'username': 'carla', 'password': 'secret1', 'fullName': 'Carla', 'position': 'PM', 'email': 'c2@test.com'
    })
    assert dup.status_code == 400

def test_booking_requires_token(client, init_data):
    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '09:00', '10:00'))
    assert resp.status_code == 401

def test_booking_scenario(client, init_data, auth):
    headers = auth(init_data.user)
    room = init_data.unstaffed

    resp = client.post('/api/bookings/', json=_payload(room, '09:00', '10:00'), headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()['status'] == 'confirmed'

    resp = client.post('/api/bookings/', json=_payload(room, '09:30', '10:30'), headers=headers)
    assert resp.status_code == 409
    assert 'already booked' in resp.get_json()['message']

    resp = client.post('/api/bookings/', json=_payload(room, '08:00', '09:00'), headers=headers)
    assert resp.status_code == 201

    resp = client.post('/api/bookings/', json=_payload(room, '10:00', '09:00'), headers=headers)
    assert resp.status_code == 400
    assert 'End time must be after start time' in resp.get_json()['message']

def test_booking_payload_validation(client, init_data, auth):
    headers = auth(init_data.user)

    missing_title = _payload(init_data.unstaffed, '09:00', '10:00')
    del missing_title['title']
    resp = client.post('/api/bookings/', json=missing_title, headers=headers)
    assert resp.status_code == 400
    assert any(e['field'] == 'title' for e in resp.get_json()['errors'])

    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '9h', '10:00'), headers=headers)
    assert resp.status_code == 400

    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '09:00', '10:00', peopleCount=0), headers=headers)
    assert resp.status_code == 400

    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '09:00', '10:00', date='10/06/2025'), headers=headers)
    assert resp.status_code == 400

    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '09:00', '10:00', date='2025-13-45'), headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'date'

    resp = client.post('/api/bookings/', json=_payload(init_data.unstaffed, '9:5', '10:00'), headers=headers)
    assert resp.status_code == 400

    resp = client.post('/api/bookings/', data='nope', headers=headers)
    assert resp.status_code == 400

def test_booking_unknown_room(client, init_data, auth):
    data = _payload(init_data.unstaffed, '09:00', '10:00', roomId=999)
    resp = client.post('/api/bookings/', json=data, headers=auth(init_data.user))
    assert resp.status_code == 404

def test_catering_booking_creates_order_and_notifies(client, init_data, auth):
    tab = MagicMock()
    tab.connected = True
    get_kitchen_hub().register(init_data.worker.id, tab)

    data = _payload(init_data.staffed, '09:00', '10:00', cafeRequested=True, peopleCount=4,
                    requestedMeals='Croissants', requestedDrinks='Coffee')
    resp = client.post('/api/bookings/', json=data, headers=auth(init_data.user))
    assert resp.status_code == 201

    order = KitchenOrder.query.one()
    assert order.user_id == init_data.worker.id
    tab.send.assert_called_once()
    assert json.loads(tab.send.call_args[0][0])['type'] == 'NEW_KITCHEN_ORDER'

def test_update_and_delete_booking(client, init_data, auth, book):
    booking = book(init_data.user, init_data.unstaffed, '09:00', '10:00')
    url = f'/api/bookings/{booking.id}'

    resp = client.patch(url, json={'description': 'Agenda attached'}, headers=auth(init_data.user))
    assert resp.status_code == 200
    assert resp.get_json()['description'] == 'Agenda attached'

    resp = client.patch(url, json={'cafeRequested': True, 'peopleCount': 6, 'requestedDrinks': 'Water'}, headers=auth(init_data.user))
    assert resp.status_code == 200
    assert (resp.get_json()['peopleCount'], resp.get_json()['requestedDrinks']) == (6, 'Water')

    resp = client.patch(url, json={'title': 'Hijack'}, headers=auth(init_data.other))
    assert resp.status_code == 403

    resp = client.patch(url, json={'startTime': '11:00'}, headers=auth(init_data.user))
    assert resp.status_code == 400

    resp = client.patch('/api/bookings/999', json={'title': 'x'}, headers=auth(init_data.user))
    assert resp.status_code == 404

    resp = client.delete(url, headers=auth(init_data.other))
    assert resp.status_code == 403

    resp = client.delete(url, headers=auth(init_data.admin))
    assert resp.status_code == 204

    resp = client.delete(url, headers=auth(init_data.user))
    assert resp.status_code == 404

def test_list_bookings(client, init_data, auth, book):
    book(init_data.user, init_data.unstaffed, '09:00', '10:00')
    book(init_data.other, init_data.unstaffed, '10:00', '11:00')

    mine = client.get('/api/bookings/', headers=auth(init_data.user)).get_json()
    assert len(mine) == 1
    assert mine[0]['room']['name'] == 'Sala B'

    everything = client.get('/api/bookings/all', headers=auth(init_data.user)).get_json()
    assert len(everything) == 2

def test_availability_endpoint(client, init_data, book):
    book(init_data.user, init_data.unstaffed, '09:00', '10:00')
    url = f'/api/rooms/{init_data.unstaffed.id}/availability'

    starts = client.get(url, query_string={'date': DAY}).get_json()['startTimes']
    assert '09:00' not in starts and '10:00' in starts

    ends = client.get(url, query_string={'date': DAY, 'start': '08:00'}).get_json()['endTimes']
    assert ends == ['08:30', '09:00']

def test_kitchen_order_routes(client, init_data, auth, book):
    book(init_data.user, init_data.staffed, '09:00', '10:00', cafeRequested=True, peopleCount=4)
    order = KitchenOrder.query.one()

    resp = client.get('/api/kitchen/orders', headers=auth(init_data.user))
    assert resp.status_code == 403

    orders = client.get('/api/kitchen/orders', headers=auth(init_data.worker)).get_json()
    assert [o['id'] for o in orders] == [order.id]
    assert orders[0]['room']['name'] == 'Sala A'

    resp = client.patch(f'/api/kitchen/orders/{order.id}/complete', headers=auth(init_data.user))
    assert resp.status_code == 403

    resp = client.patch(f'/api/kitchen/orders/{order.id}/complete', headers=auth(init_data.worker))
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'completed'
    assert resp.get_json()['completedBy'] == init_data.worker.id

    resp = client.patch(f'/api/kitchen/orders/{order.id}/complete', headers=auth(init_data.worker))
    assert resp.get_json()['status'] == 'completed'

    pending = client.get('/api/kitchen/orders?status=pending', headers=auth(init_data.worker)).get_json()
    assert pending == []

    resp = client.patch('/api/kitchen/orders/999/complete', headers=auth(init_data.worker))
    assert resp.status_code == 404

    by_room = client.get(f'/api/kitchen/orders/room/{init_data.staffed.id}', headers=auth(init_data.worker))
    assert len(by_room.get_json()) == 1

def test_room_admin(client, init_data, auth):
    resp = client.post('/api/rooms/', json={'name': 'Sala C', 'location': '3rd', 'capacity': 6},
                       headers=auth(init_data.user))
    assert resp.status_code == 403

    resp = client.post('/api/rooms/', json={'name': 'Sala C', 'location': '3rd', 'capacity': 600},
                       headers=auth(init_data.admin))
    assert resp.status_code == 400

    resp = client.post('/api/rooms/', json={'name': 'Sala C', 'location': '3rd', 'capacity': 6},
                       headers=auth(init_data.admin))
    assert resp.status_code == 201
    room_id = resp.get_json()['id']

    resp = client.patch(f'/api/rooms/{room_id}', json={'assignedKitchenUserId': init_data.user.id},
                        headers=auth(init_data.admin))
    assert resp.status_code == 400

    resp = client.patch(f'/api/rooms/{room_id}', json={'assignedKitchenUserId': init_data.worker.id},
                        headers=auth(init_data.admin))
    assert resp.get_json()['assignedKitchenUserId'] == init_data.worker.id

    resp = client.delete(f'/api/rooms/{room_id}', headers=auth(init_data.admin))
    assert resp.status_code == 204
    # Soft delete: row kept, hidden from listing
    assert Room.query.get(room_id).is_active is False
    names = [r['name'] for r in client.get('/api/rooms/').get_json()]
    assert 'Sala C' not in names

def test_user_admin(client, init_data, auth):
    users = client.get('/api/users/', headers=auth(init_data.admin)).get_json()
    assert len(users) == 4
    assert all('password_hash' not in u for u in users)

    resp = client.patch(f'/api/users/{init_data.other.id}/kitchen', json={'isKitchen': True},
                        headers=auth(init_data.admin))
    assert resp.status_code == 200
    assert resp.get_json()['user']['isKitchen'] is True

    resp = client.put(f'/api/users/{init_data.other.id}/password', json={'password': '123'},
                      headers=auth(init_data.admin))
    assert resp.status_code == 400

    resp = client.get('/api/users/', headers=auth(init_data.user))
    assert resp.status_code == 403

def test_dashboard(client, init_data, auth, book):
    from datetime import date
    today = date.today().isoformat()
    book(init_data.user, init_data.unstaffed, '09:00', '10:00', date=today)
    book(init_data.other, init_data.staffed, '07:00', '18:00', date=today)

    stats = client.get('/api/dashboard/stats', headers=auth(init_data.user)).get_json()
    assert stats['todayBookings'] == 2
    assert stats['activeRooms'] == 2
    assert stats['activeUsers'] == 2
    # (60 + 660) / (2 * 660)
    assert stats['occupancyRate'] == 55

    resp = client.get('/api/dashboard/room-stats', headers=auth(init_data.user))
    assert resp.status_code == 403
    room_stats = client.get('/api/dashboard/room-stats', headers=auth(init_data.admin)).get_json()
    assert [r['bookingCount'] for r in room_stats] == [1, 1]

def test_ws_registers_kitchen_user(app, init_data):
    hub = get_kitchen_hub()
    ws = MagicMock()

    worker_id = handle_client_message(ws, json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': init_data.worker.id}), hub)

    assert worker_id == init_data.worker.id
    assert hub.connections_for(init_data.worker.id) == [ws]
    assert json.loads(ws.send.call_args[0][0])['type'] == 'CONNECTION_CONFIRMED'

def test_ws_rejects_non_kitchen_user(app, init_data):
    hub = get_kitchen_hub()
    ws = MagicMock()

    assert handle_client_message(ws, json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': init_data.user.id}), hub) is None
    assert handle_client_message(ws, 'garbage', hub) is None
    assert handle_client_message(ws, json.dumps({'type': 'PING'}), hub) is None
    assert hub.connected_workers() == []
    assert json.loads(ws.send.call_args[0][0])['type'] == 'CONNECTION_REJECTED'

def test_ws_socket_cannot_switch_worker(app, init_data):
    hub = get_kitchen_hub()
    init_data.other.is_kitchen = True
    db.session.commit()
    ws = MagicMock()

    assert handle_client_message(ws, json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': init_data.worker.id}), hub) == init_data.worker.id
    # Identifying again as the same worker is harmless
    assert handle_client_message(ws, json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': init_data.worker.id}), hub) == init_data.worker.id

    assert handle_client_message(ws, json.dumps({'type': 'KITCHEN_USER_CONNECT', 'userId': init_data.other.id}), hub) is None
    assert json.loads(ws.send.call_args[0][0])['type'] == 'CONNECTION_REJECTED'
    assert hub.connected_workers() == [init_data.worker.id]
    assert hub.unregister(ws) == init_data.worker.id
    assert hub.connected_workers() == []
