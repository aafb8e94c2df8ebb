from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from library_api.extensions import db
from library_api.services.borrowing_service import BorrowingService
from library_api.utils.decorators import admin_required
from library_api.utils.validators import json_object, parse_returned_filter, validate_id_list

borrowing_bp = Blueprint("borrowings", __name__)


def _service():
    return BorrowingService(db.session)


@borrowing_bp.post("/borrow")
@jwt_required()
def borrow_books():
    book_ids = validate_id_list(json_object(request.get_json(silent=True)), "bookIds", "book")
    borrowings = _service().borrow(current_user.id, book_ids)
    return jsonify({
        "success": True,
        "message": "Books borrowed successfully",
        "data": [b.to_dict() for b in borrowings],
    }), 201


@borrowing_bp.post("/return")
@jwt_required()
def return_books():
    borrowing_ids = validate_id_list(json_object(request.get_json(silent=True)), "borrowingIds", "borrowing")
    borrowings = _service().return_books(current_user.id, borrowing_ids)
    return jsonify({
        "success": True,
        "message": "Books returned successfully",
        "data": [b.to_dict() for b in borrowings],
    })


@borrowing_bp.get("/user")
@jwt_required()
def user_borrowings():
    returned = parse_returned_filter(request.args.get("returned"))
    borrowings = _service().get_user_borrowings(current_user.id, returned)
    return jsonify({"success": True, "data": [b.to_dict(include_book=True) for b in borrowings]})


@borrowing_bp.get("/stats")
@admin_required
def borrowing_stats():
    return jsonify({"success": True, "data": _service().get_borrowing_stats()})
