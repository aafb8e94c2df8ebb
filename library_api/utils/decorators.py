from functools import wraps

from flask_jwt_extended import current_user, verify_jwt_in_request

from library_api.errors import Forbidden


def admin_required(fn):
    """JWT zorunlu + DB'deki güncel is_admin bayrağı kontrolü."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if not current_user or not current_user.is_admin:
            raise Forbidden("Admin access required")
        return fn(*args, **kwargs)
    return wrapper
