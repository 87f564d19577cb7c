from flask import Blueprint, request, jsonify
from roombook.models import Room, User
from roombook.extensions import db
from roombook.errors import ServiceError
from roombook.schemas import RoomCreate, RoomUpdate, parse_payload, patch_fields
from roombook.services.availability_service import AvailabilityService
from roombook.utils.decorators import token_required, admin_required

rooms_bp = Blueprint('rooms', __name__)

@rooms_bp.route('/', methods=['GET'])
def get_rooms():
    rooms = Room.query.filter(Room.is_active == True).order_by(Room.name).all()
    return jsonify([r.to_dict() for r in rooms]), 200

@rooms_bp.route('/', methods=['POST'])
@token_required
@admin_required
def create_room(current_user):
    try:
        data = parse_payload(RoomCreate, request.get_json(silent=True))
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code

    room = Room(name=data.name, location=data.location, capacity=data.capacity)
    db.session.add(room)
    db.session.commit()
    return jsonify(room.to_dict()), 201

@rooms_bp.route('/<int:room_id>', methods=['PATCH'])
@token_required
@admin_required
def update_room(current_user, room_id):
    room = Room.query.get(room_id)
    if not room:
        return jsonify({'message': 'Room not found'}), 404

    try:
        patch = patch_fields(parse_payload(RoomUpdate, request.get_json(silent=True)))
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code

    worker_id = patch.get('assigned_kitchen_user_id')
    if worker_id is not None:
        worker = User.query.get(worker_id)
        if not worker or not worker.is_kitchen:
            return jsonify({'message': 'Assigned user must be a kitchen user'}), 400

    for field, value in patch.items():
        # Only the kitchen assignment may be cleared with null
        if value is None and field != 'assigned_kitchen_user_id':
            continue
        setattr(room, field, value)

    db.session.commit()
    return jsonify(room.to_dict()), 200

@rooms_bp.route('/<int:room_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_room(current_user, room_id):
    room = Room.query.get(room_id)
    if not room:
        return jsonify({'message': 'Room not found'}), 404

    # Soft delete: bookings and kitchen orders keep referencing the room
    room.is_active = False
    db.session.commit()
    return '', 204

@rooms_bp.route('/<int:room_id>/availability', methods=['GET'])
def get_availability(room_id):
    """
    Slots the booking form may offer.

    ``?date=YYYY-MM-DD`` returns free start times; adding ``&start=HH:MM``
    returns the end times reachable from it. ``exclude`` skips a booking
    being edited.
    """
    date = request.args.get('date')
    start = request.args.get('start')
    exclude = request.args.get('exclude', type=int)

    if start:
        end_times = AvailabilityService.available_end_times(date, room_id, start, exclude_booking_id=exclude)
        return jsonify({'roomId': room_id, 'date': date, 'startTime': start, 'endTimes': end_times})

    start_times = AvailabilityService.available_start_times(date, room_id, exclude_booking_id=exclude)
    return jsonify({'roomId': room_id, 'date': date, 'startTimes': start_times})
