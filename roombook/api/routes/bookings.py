from flask import Blueprint, request, jsonify, current_app
from roombook.services.booking_service import BookingService
from roombook.schemas import BookingCreate, BookingUpdate, parse_payload
from roombook.errors import ServiceError
from roombook.extensions import db
from roombook.utils.decorators import token_required

bookings_bp = Blueprint('bookings', __name__)

@bookings_bp.route('/', methods=['GET'])
@token_required
def get_my_bookings(current_user):
    bookings = BookingService.get_user_bookings(current_user.id)
    return jsonify([b.to_dict(with_details=True) for b in bookings])

@bookings_bp.route('/all', methods=['GET'])
@token_required
def get_all_bookings(current_user):
    bookings = BookingService.get_all_bookings()
    return jsonify([b.to_dict(with_details=True) for b in bookings])

@bookings_bp.route('/', methods=['POST'])
@token_required
def create_booking(current_user):
    try:
        data = parse_payload(BookingCreate, request.get_json(silent=True))
        booking = BookingService.create_booking(current_user, data)
        return jsonify(booking.to_dict()), 201
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Error creating booking: {e}")
        return jsonify({'message': 'Failed to create booking'}), 500

@bookings_bp.route('/<int:booking_id>', methods=['PATCH'])
@token_required
def update_booking(current_user, booking_id):
    try:
        data = parse_payload(BookingUpdate, request.get_json(silent=True))
        booking = BookingService.update_booking(booking_id, current_user, data)
        return jsonify(booking.to_dict()), 200
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Error updating booking {booking_id}: {e}")
        return jsonify({'message': 'Failed to update booking'}), 500

@bookings_bp.route('/<int:booking_id>', methods=['DELETE'])
@token_required
def delete_booking(current_user, booking_id):
    try:
        BookingService.delete_booking(booking_id, current_user)
        return '', 204
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
