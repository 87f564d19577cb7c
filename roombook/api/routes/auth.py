from flask import Blueprint, request, jsonify, current_app
from roombook.models import User
from roombook.extensions import db
from roombook.errors import ServiceError
from roombook.schemas import UserRegister, parse_payload
from roombook.utils.decorators import token_required
from werkzeug.security import generate_password_hash, check_password_hash
import jwt
from datetime import datetime, timedelta

auth_bp = Blueprint('auth', __name__)


def issue_token(user):
    return jwt.encode({
        'user_id': user.id,
        'exp': datetime.utcnow() + timedelta(hours=current_app.config['JWT_EXPIRATION_HOURS'])
    }, current_app.config['SECRET_KEY'], algorithm="HS256")


@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        data = parse_payload(UserRegister, request.get_json(silent=True))
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code

    if User.query.filter_by(username=data.username).first():
        return jsonify({'message': 'Username already exists'}), 400
    if User.query.filter_by(email=data.email).first():
        return jsonify({'message': 'Email already exists'}), 400

    user = User(
        username=data.username,
        password_hash=generate_password_hash(data.password),
        full_name=data.full_name,
        position=data.position,
        email=data.email
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"User {user.username} registered")

    return jsonify({'token': issue_token(user), 'user': user.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()

    if not user or not check_password_hash(user.password_hash, data.get('password') or ''):
        return jsonify({'message': 'Invalid credentials'}), 401

    return jsonify({
        'token': issue_token(user),
        'username': user.username,
        'isAdmin': user.is_admin,
        'isKitchen': user.is_kitchen
    })


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user):
    return jsonify(current_user.to_dict())
