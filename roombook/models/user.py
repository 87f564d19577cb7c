from roombook.extensions import db
from datetime import datetime

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    full_name = db.Column(db.String(128), nullable=False, default='')
    position = db.Column(db.String(128), nullable=False, default='')
    email = db.Column(db.String(128), unique=True, nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_kitchen = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    bookings = db.relationship('Booking', backref='user', lazy=True)

    def to_dict(self):
        # password hash is never serialised
        return {
            'id': self.id,
            'username': self.username,
            'fullName': self.full_name,
            'position': self.position,
            'email': self.email,
            'isAdmin': self.is_admin,
            'isKitchen': self.is_kitchen,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
