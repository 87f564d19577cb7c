from roombook.models.user import User
from roombook.models.room import Room
from roombook.models.booking import Booking, BOOKING_STATUSES
from roombook.models.kitchen_order import KitchenOrder

__all__ = ['User', 'Room', 'Booking', 'BOOKING_STATUSES', 'KitchenOrder']
