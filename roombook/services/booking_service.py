from flask import current_app
from roombook.models import Room, Booking
from roombook.extensions import db
from roombook.errors import Conflict, InvalidRange, NotFound, AccessDenied, DependencyFailure
from roombook.schemas import patch_fields
from roombook.services.kitchen_service import KitchenService
from roombook.services.room_locks import get_room_day_locks
from roombook.utils.timeslots import overlaps, is_valid_range


class BookingService:

    @staticmethod
    def list_confirmed(room_id, date, exclude_booking_id=None):
        """Confirmed bookings for a room on a day, always read from the database."""
        query = Booking.query.filter(
            Booking.room_id == room_id,
            Booking.date == date,
            Booking.status == 'confirmed'
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.all()

    @staticmethod
    def has_conflict(room_id, date, start_time, end_time, exclude_booking_id=None):
        """Check if [start_time, end_time) overlaps a confirmed booking of the room on that date."""
        existing = BookingService.list_confirmed(room_id, date, exclude_booking_id)
        for booking in existing:
            if overlaps(start_time, end_time, booking.start_time, booking.end_time):
                current_app.logger.debug(
                    f"Conflict for room {room_id} on {date} {start_time}-{end_time} "
                    f"with booking {booking.id} ({booking.start_time}-{booking.end_time})"
                )
                return True
        return False

    @staticmethod
    def check_slot(room_id, date, start_time, end_time, exclude_booking_id=None):
        """Raise InvalidRange or Conflict if the range cannot be booked."""
        if not is_valid_range(start_time, end_time):
            raise InvalidRange("End time must be after start time.")

        if BookingService.has_conflict(room_id, date, start_time, end_time, exclude_booking_id):
            raise Conflict("Room is already booked for this time slot.")

    @staticmethod
    def get_active_room(room_id):
        room = Room.query.get(room_id)
        if not room or not room.is_active:
            raise NotFound("Room not found.")
        return room

    @staticmethod
    def get_booking_for(booking_id, user):
        """Load a booking the caller owns (admins may touch any booking)."""
        booking = Booking.query.get(booking_id)
        if not booking:
            raise NotFound("Booking not found.")
        if booking.user_id != user.id and not user.is_admin:
            raise AccessDenied("Access denied.")
        return booking

    @staticmethod
    def create_booking(user, data):
        """
        Main entry point to book a room.

        ``data`` is a validated ``BookingCreate``. Steps run strictly in order:
        validate, conflict check, persist booking, then catering dispatch.
        A catering failure never fails the booking.
        """
        room = BookingService.get_active_room(data.room_id)

        with get_room_day_locks().hold(room.id, data.date):
            BookingService.check_slot(room.id, data.date, data.start_time, data.end_time)

            booking = Booking(
                title=data.title,
                description=data.description,
                responsavel=data.responsavel,
                user_id=user.id,
                room_id=room.id,
                date=data.date,
                start_time=data.start_time,
                end_time=data.end_time,
                status='confirmed',
                cafe_requested=data.cafe_requested,
                people_count=data.people_count,
                requested_meals=data.requested_meals,
                requested_drinks=data.requested_drinks
            )
            db.session.add(booking)
            db.session.commit()

        current_app.logger.info(
            f"Booking {booking.id} created by user {user.id} for room {room.id} "
            f"on {booking.date} {booking.start_time}-{booking.end_time}"
        )

        if booking.cafe_requested and booking.people_count:
            try:
                KitchenService.dispatch_for_booking(booking, room)
            except DependencyFailure as e:
                current_app.logger.error(f"Catering request for booking {booking.id} not dispatched: {e}")

        return booking

    @staticmethod
    def update_booking(booking_id, user, data):
        """Apply a validated ``BookingUpdate``, re-checking conflicts against everything but itself."""
        booking = BookingService.get_booking_for(booking_id, user)
        patch = patch_fields(data)

        moves = any(k in patch for k in ('room_id', 'date', 'start_time', 'end_time'))
        reconfirms = patch.get('status') == 'confirmed' and booking.status != 'confirmed'

        if moves or reconfirms:
            room_id = patch.get('room_id') or booking.room_id
            date = patch.get('date') or booking.date
            start_time = patch.get('start_time') or booking.start_time
            end_time = patch.get('end_time') or booking.end_time

            # Moving or reconfirming needs a bookable room, even the current one
            BookingService.get_active_room(room_id)

            with get_room_day_locks().hold(room_id, date):
                BookingService.check_slot(room_id, date, start_time, end_time, exclude_booking_id=booking.id)
                BookingService._apply_patch(booking, patch)
                db.session.commit()
        else:
            BookingService._apply_patch(booking, patch)
            db.session.commit()

        return booking

    @staticmethod
    def _apply_patch(booking, patch):
        for field, value in patch.items():
            if field in ('title', 'room_id', 'date', 'start_time', 'end_time', 'cafe_requested') and value is None:
                continue
            setattr(booking, field, value)

    @staticmethod
    def delete_booking(booking_id, user):
        booking = BookingService.get_booking_for(booking_id, user)

        # The ORM nulls kitchen_orders.booking_id; the order itself is kept
        db.session.delete(booking)
        db.session.commit()
        current_app.logger.info(f"Booking {booking_id} deleted by user {user.id}")

    @staticmethod
    def get_user_bookings(user_id):
        return Booking.query.filter(
            Booking.user_id == user_id
        ).order_by(Booking.date.desc(), Booking.start_time.desc()).all()

    @staticmethod
    def get_all_bookings():
        return Booking.query.order_by(Booking.date.desc(), Booking.start_time.desc()).all()
