from roombook.extensions import db
from datetime import datetime

BOOKING_STATUSES = ('confirmed', 'pending', 'cancelled')

class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    responsavel = db.Column(db.String(128), nullable=True)  # free-text delegate name

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)

    # Wall-clock strings, no time zone
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)  # HH:MM

    status = db.Column(db.String(20), nullable=False, default='confirmed')  # confirmed, pending, cancelled

    # Catering request
    cafe_requested = db.Column(db.Boolean, nullable=False, default=False)
    people_count = db.Column(db.Integer, nullable=True)
    requested_meals = db.Column(db.Text, nullable=True)
    requested_drinks = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    room = db.relationship('Room', backref=db.backref('bookings', lazy=True))

    __table_args__ = (db.Index('ix_bookings_room_date', 'room_id', 'date'),)

    def to_dict(self, with_details=False):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'responsavel': self.responsavel,
            'userId': self.user_id,
            'roomId': self.room_id,
            'date': self.date,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'status': self.status,
            'cafeRequested': self.cafe_requested,
            'peopleCount': self.people_count,
            'requestedMeals': self.requested_meals,
            'requestedDrinks': self.requested_drinks,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
        if with_details:
            data['room'] = self.room.to_dict() if self.room else None
            data['user'] = self.user.to_dict() if self.user else None
        return data
