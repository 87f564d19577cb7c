from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from roombook.models import KitchenOrder
from roombook.extensions import db
from roombook.errors import NotFound, DependencyFailure
from roombook.services.notification_hub import get_kitchen_hub

NEW_KITCHEN_ORDER = 'NEW_KITCHEN_ORDER'

class KitchenService:

    @staticmethod
    def build_order_event(order, booking, room):
        return {
            'type': NEW_KITCHEN_ORDER,
            'order': order.to_dict(),
            'booking': {
                'title': booking.title,
                'date': booking.date,
                'startTime': booking.start_time,
                'endTime': booking.end_time,
                'room': room.name
            },
            'message': f"New catering order for {room.name}"
        }

    @staticmethod
    def dispatch_for_booking(booking, room):
        """
        Turn the catering request of a committed booking into a kitchen order.

        The order goes to the room's assigned kitchen worker. Rooms without a
        worker get no order. Raises DependencyFailure if the order cannot be
        stored; a failed push is only logged since the order already exists.
        """
        worker_id = room.assigned_kitchen_user_id
        if not worker_id:
            current_app.logger.warning(
                f"No kitchen user assigned to room {room.name} ({room.id}), "
                f"catering for booking {booking.id} not dispatched"
            )
            return None

        try:
            order = KitchenOrder(
                booking_id=booking.id,
                room_id=room.id,
                user_id=worker_id,
                people_count=booking.people_count,
                requested_meals=booking.requested_meals or '',
                requested_drinks=booking.requested_drinks or '',
                status='pending',
                order_date=booking.date,
                order_time=booking.start_time
            )
            db.session.add(order)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DependencyFailure(f"Failed to create kitchen order: {e}")

        current_app.logger.info(f"Kitchen order {order.id} created for kitchen user {worker_id}, booking {booking.id}")

        try:
            event = KitchenService.build_order_event(order, booking, room)
            delivered = get_kitchen_hub().notify(worker_id, event)
            current_app.logger.info(f"Kitchen order {order.id} pushed to {delivered} connection(s)")
        except Exception as e:
            current_app.logger.error(f"Failed to notify kitchen user {worker_id} of order {order.id}: {e}")

        return order

    @staticmethod
    def complete_order(order_id, completing_user_id):
        """Mark an order completed. Calling it again re-stamps the completion."""
        order = KitchenOrder.query.get(order_id)
        if not order:
            raise NotFound("Kitchen order not found.")

        order.status = 'completed'
        order.completed_at = datetime.utcnow()
        order.completed_by = completing_user_id
        db.session.commit()

        current_app.logger.info(f"Kitchen order {order.id} completed by user {completing_user_id}")
        return order

    @staticmethod
    def get_orders_for_user(user_id, status=None):
        """Orders assigned to a kitchen worker, pending first then newest."""
        query = KitchenOrder.query.filter(KitchenOrder.user_id == user_id)
        if status:
            query = query.filter(KitchenOrder.status == status)
        return query.order_by(
            KitchenOrder.status.desc(),
            KitchenOrder.order_date.desc(),
            KitchenOrder.order_time.desc()
        ).all()

    @staticmethod
    def get_orders_for_room(room_id):
        return KitchenOrder.query.filter(
            KitchenOrder.room_id == room_id
        ).order_by(KitchenOrder.order_date.desc(), KitchenOrder.order_time.desc()).all()
