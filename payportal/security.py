"""
Role gate for blueprints. The token proves identity; the role is read from
the users table on every request so a stale token cannot keep admin rights.
"""

import uuid
from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from payportal.extensions import db
from payportal.models.user import User


def _load_current_user():
    try:
        user_id = uuid.UUID(get_jwt_identity())
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def role_required(*roles):
    """Require a valid bearer token and, when roles are given, one of them."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = _load_current_user()
            if user is None:
                return jsonify({'error': 'Account no longer exists'}), 401
            if roles and user.role not in roles:
                return jsonify({'error': 'Forbidden'}), 403
            g.current_user = user
            return fn(*args, **kwargs)
        return wrapper
    return decorator


login_required = role_required()
admin_required = role_required('admin')
