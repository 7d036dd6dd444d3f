import logging
from functools import wraps

from flask import jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy.exc import SQLAlchemyError

from errors import RegistryError

logger = logging.getLogger(__name__)


def with_caller(f):
    """Require a JWT and pass its identity to the view as `caller`."""
    @wraps(f)
    @jwt_required()
    def decorated_function(*args, **kwargs):
        return f(get_jwt_identity(), *args, **kwargs)
    return decorated_function


def handle_registry_errors(f):
    """Turn registry failures into JSON error responses."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except RegistryError as e:
            logger.warning("[DENIED] %s %s: %s", request.method, request.path, e.msg)
            return jsonify({"msg": e.msg, "error": e.code}), e.status_code
        except SQLAlchemyError as e:
            logger.exception("[ERROR] Database failure on %s %s", request.method, request.path)
            return jsonify({"msg": "Registry operation failed", "error": str(e)}), 500
    return decorated_function


def require_json_fields(*fields):
    """Decorator to require non-empty string fields in the JSON body.

    The parsed body is passed to the view as the `data` keyword argument.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            missing = [
                name for name in fields
                if not isinstance(data.get(name), str) or not data.get(name).strip()
            ]
            if missing:
                return jsonify({"msg": "Missing required fields", "required": missing}), 400
            return f(*args, data=data, **kwargs)
        return decorated_function
    return decorator
