from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from library_api.extensions import db
from library_api.services.user_service import UserService
from library_api.utils.decorators import admin_required
from library_api.utils.validators import (
    json_object,
    validate_login,
    validate_notes,
    validate_register,
    validate_user_id,
)

user_bp = Blueprint("users", __name__)


def _service():
    return UserService(db.session)


@user_bp.post("/register")
def register():
    data = validate_register(json_object(request.get_json(silent=True)))
    result = _service().register(data["username"], data["password"])
    return jsonify({"success": True, "message": "User registered successfully", "data": result}), 201


@user_bp.post("/login")
def login():
    data = validate_login(json_object(request.get_json(silent=True)))
    result = _service().login(data["username"], data["password"])
    return jsonify({"success": True, "message": "Login successful", "data": result})


@user_bp.get("/profile")
@jwt_required()
def profile():
    return jsonify({"success": True, "data": _service().get_profile(current_user.id)})


@user_bp.post("/notes")
@jwt_required()
def save_notes():
    notes = validate_notes(json_object(request.get_json(silent=True)))
    message = _service().save_notes(current_user.id, notes)
    return jsonify({"success": True, "message": message})


@user_bp.post("/promote")
@admin_required
def promote():
    user_id = validate_user_id(json_object(request.get_json(silent=True)))
    message = _service().promote(user_id)
    return jsonify({"success": True, "message": message})
