from functools import wraps
from flask import request, jsonify, current_app
import jwt
from roombook.models import User

def get_token_user():
    """Resolve the bearer token of the current request to a User, or None."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith("Bearer "):
        return None, 'Token is missing!'

    token = auth_header.split(" ")[1]
    try:
        data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
    except jwt.InvalidTokenError as e:
        return None, f'Token is invalid! {e}'

    user = User.query.get(data.get('user_id'))
    if not user:
        return None, 'Token is invalid! User not found'
    return user, None

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user, error = get_token_user()
        if not current_user:
            return jsonify({'message': error}), 401
        return f(current_user, *args, **kwargs)

    return decorated

def admin_required(f):
    # Stack under @token_required, which passes current_user as first arg
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = args[0]
        if not current_user.is_admin:
            return jsonify({'message': 'Admin access required'}), 403
        return f(*args, **kwargs)
    return decorated

def kitchen_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = args[0]
        if not current_user.is_kitchen:
            return jsonify({'message': 'Kitchen access required'}), 403
        return f(*args, **kwargs)
    return decorated
