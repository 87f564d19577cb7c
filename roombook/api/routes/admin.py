from flask import Blueprint, request, jsonify
from roombook.utils.decorators import token_required, admin_required
from roombook.models import User
from roombook.extensions import db
from werkzeug.security import generate_password_hash

admin_bp = Blueprint('admin', __name__)

# --- USERS MANAGEMENT ---

@admin_bp.route('/', methods=['GET'])
@token_required
@admin_required
def get_users(current_user):
    users = User.query.order_by(User.full_name).all()
    return jsonify([u.to_dict() for u in users]), 200

def _set_flag(user_id, attr, key):
    user = User.query.get(user_id)
    if not user:
        return jsonify({'message': 'User not found'}), 404

    data = request.get_json(silent=True) or {}
    if not isinstance(data.get(key), bool):
        return jsonify({'message': f'{key} must be a boolean'}), 400

    setattr(user, attr, data[key])
    db.session.commit()
    return jsonify({'message': f'User {key} status updated successfully', 'user': user.to_dict()}), 200

@admin_bp.route('/<int:user_id>/admin', methods=['PATCH'])
@token_required
@admin_required
def update_admin_status(current_user, user_id):
    # Prevent locking yourself out
    if user_id == current_user.id:
        return jsonify({'message': 'Cannot change your own admin status'}), 400
    return _set_flag(user_id, 'is_admin', 'isAdmin')

@admin_bp.route('/<int:user_id>/kitchen', methods=['PATCH'])
@token_required
@admin_required
def update_kitchen_status(current_user, user_id):
    return _set_flag(user_id, 'is_kitchen', 'isKitchen')

@admin_bp.route('/<int:user_id>/password', methods=['PUT'])
@token_required
@admin_required
def update_password(current_user, user_id):
    user = User.query.get(user_id)
    if not user:
        return jsonify({'message': 'User not found'}), 404

    data = request.get_json(silent=True) or {}
    password = data.get('password')
    if not password or len(password) < 6:
        return jsonify({'message': 'Password must be at least 6 characters long'}), 400

    user.password_hash = generate_password_hash(password)
    db.session.commit()
    return jsonify({'message': 'User password updated successfully'}), 200
