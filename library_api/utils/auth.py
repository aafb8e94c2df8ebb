from flask import current_app, jsonify

from library_api.extensions import db
from library_api.repositories.user_repo import UserRepo


def _unauthorized(message):
    return jsonify({"success": False, "error": "unauthorized", "message": message}), 401


def register_jwt_callbacks(jwt):
    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return UserRepo(db.session).get_by_id(user_id)

    @jwt.user_lookup_error_loader
    def _user_missing(_jwt_header, _jwt_data):
        return _unauthorized("User not found")

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return _unauthorized("Authentication required")

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        current_app.logger.info(f"[auth] invalid token: {reason}")
        return _unauthorized("Invalid or expired token")

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_data):
        return _unauthorized("Invalid or expired token")
