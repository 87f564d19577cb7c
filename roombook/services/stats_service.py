from datetime import date as date_cls
from flask import current_app
from sqlalchemy import func
from roombook.models import Room, Booking
from roombook.extensions import db
from roombook.utils.timeslots import to_minutes

class StatsService:

    @staticmethod
    def get_dashboard_stats(today=None):
        """Headline numbers for the dashboard, computed for ``today`` (YYYY-MM-DD)."""
        today = today or date_cls.today().isoformat()

        today_bookings = Booking.query.filter(
            Booking.date == today,
            Booking.status == 'confirmed'
        ).count()

        active_rooms = Room.query.filter(Room.is_active == True).count()

        active_users = db.session.query(
            func.count(func.distinct(Booking.user_id))
        ).filter(Booking.status == 'confirmed').scalar() or 0

        # Occupancy: minutes booked today over minutes open across active rooms
        total_available = active_rooms * current_app.config['WORKING_MINUTES_PER_ROOM']
        reserved = Booking.query.join(Room, Booking.room_id == Room.id).filter(
            Booking.date == today,
            Booking.status == 'confirmed',
            Room.is_active == True
        ).all()
        reserved_minutes = sum(to_minutes(b.end_time) - to_minutes(b.start_time) for b in reserved)

        occupancy_rate = round(reserved_minutes / total_available * 100) if total_available > 0 else 0

        return {
            'todayBookings': today_bookings,
            'activeRooms': active_rooms,
            'occupancyRate': occupancy_rate,
            'activeUsers': active_users
        }

    @staticmethod
    def get_room_stats():
        """Booking counts per active room, most booked first."""
        booking_count = func.count(Booking.id)
        rows = db.session.query(
            Room.id, Room.name, Room.location, booking_count
        ).outerjoin(
            Booking, Booking.room_id == Room.id
        ).filter(
            Room.is_active == True
        ).group_by(
            Room.id, Room.name, Room.location
        ).order_by(booking_count.desc(), Room.name).all()

        return [
            {'roomId': r[0], 'roomName': r[1], 'location': r[2], 'bookingCount': r[3]}
            for r in rows
        ]
