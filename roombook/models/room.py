from roombook.extensions import db
from datetime import datetime

class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    location = db.Column(db.String(128), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Kitchen worker who receives catering orders for this room
    assigned_kitchen_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    assigned_kitchen_user = db.relationship('User', foreign_keys=[assigned_kitchen_user_id])

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (db.CheckConstraint('capacity > 0', name='check_capacity_positive'),)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'capacity': self.capacity,
            'isActive': self.is_active,
            'assignedKitchenUserId': self.assigned_kitchen_user_id
        }
