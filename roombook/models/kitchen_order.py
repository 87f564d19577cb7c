from roombook.extensions import db
from datetime import datetime

class KitchenOrder(db.Model):
    __tablename__ = 'kitchen_orders'

    id = db.Column(db.Integer, primary_key=True)
    # Kept when the booking is deleted; the order is an audit record
    booking_id = db.Column(db.Integer, db.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True, unique=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    # Responsible kitchen worker, not the person who booked the room
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    people_count = db.Column(db.Integer, nullable=False)
    requested_meals = db.Column(db.Text, nullable=False, default='')
    requested_drinks = db.Column(db.Text, nullable=False, default='')
    status = db.Column(db.String(20), nullable=False, default='pending')  # pending, completed

    # Copied from the booking when the order is created
    order_date = db.Column(db.String(10), nullable=False)
    order_time = db.Column(db.String(5), nullable=False)

    completed_at = db.Column(db.DateTime, nullable=True)
    completed_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    booking = db.relationship('Booking', backref=db.backref('kitchen_order', uselist=False))
    room = db.relationship('Room')

    def to_dict(self, with_details=False):
        data = {
            'id': self.id,
            'bookingId': self.booking_id,
            'roomId': self.room_id,
            'userId': self.user_id,
            'peopleCount': self.people_count,
            'requestedMeals': self.requested_meals,
            'requestedDrinks': self.requested_drinks,
            'status': self.status,
            'orderDate': self.order_date,
            'orderTime': self.order_time,
            'completedAt': self.completed_at.isoformat() if self.completed_at else None,
            'completedBy': self.completed_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
        if with_details:
            data['room'] = self.room.to_dict() if self.room else None
            data['booking'] = self.booking.to_dict() if self.booking else None
        return data
