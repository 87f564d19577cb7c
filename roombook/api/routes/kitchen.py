from flask import Blueprint, request, jsonify
from roombook.services.kitchen_service import KitchenService
from roombook.errors import ServiceError
from roombook.utils.decorators import token_required, kitchen_required

kitchen_bp = Blueprint('kitchen', __name__)

@kitchen_bp.route('/orders', methods=['GET'])
@token_required
@kitchen_required
def get_my_orders(current_user):
    status = request.args.get('status')
    if status and status not in ('pending', 'completed'):
        return jsonify({'message': 'status must be pending or completed'}), 400

    orders = KitchenService.get_orders_for_user(current_user.id, status=status)
    return jsonify([o.to_dict(with_details=True) for o in orders])

@kitchen_bp.route('/orders/room/<int:room_id>', methods=['GET'])
@token_required
@kitchen_required
def get_room_orders(current_user, room_id):
    orders = KitchenService.get_orders_for_room(room_id)
    return jsonify([o.to_dict(with_details=True) for o in orders])

@kitchen_bp.route('/orders/<int:order_id>/complete', methods=['PATCH'])
@token_required
@kitchen_required
def complete_order(current_user, order_id):
    try:
        order = KitchenService.complete_order(order_id, current_user.id)
        return jsonify(order.to_dict()), 200
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
