import math

from flask import Blueprint, current_app, request, jsonify

from library_api.extensions import db
from library_api.services.book_service import BookService
from library_api.utils.decorators import admin_required
from library_api.utils.validators import (
    json_object,
    parse_positive_int,
    validate_book,
    validate_search_query,
)

book_bp = Blueprint("books", __name__)


def _service():
    return BookService(db.session)


def _page_args():
    cfg = current_app.config
    page = parse_positive_int(request.args.get("page"), 1)
    limit = parse_positive_int(
        request.args.get("limit"), cfg["DEFAULT_PAGE_SIZE"], cfg["MAX_PAGE_SIZE"]
    )
    return page, limit


def _paginated(books, total, page, limit):
    return jsonify({
        "success": True,
        "data": [b.to_dict() for b in books],
        "pagination": {
            "total": total,
            "pages": math.ceil(total / limit),
            "page": page,
            "limit": limit,
        },
    })


@book_bp.post("")
@admin_required
def create_book():
    data = validate_book(json_object(request.get_json(silent=True)))
    b = _service().create_book(**data)
    return jsonify({"success": True, "message": "Book created successfully", "data": b.to_dict()}), 201


@book_bp.get("")
def list_books():
    page, limit = _page_args()
    books, total = _service().list_books(page, limit)
    return _paginated(books, total, page, limit)


@book_bp.get("/search")
def search_books():
    q = validate_search_query(request.args)
    page, limit = _page_args()
    books, total = _service().search_books(q, page, limit)
    return _paginated(books, total, page, limit)


@book_bp.get("/stats/most-borrowed")
def most_borrowed():
    cfg = current_app.config
    limit = parse_positive_int(request.args.get("limit"), cfg["DEFAULT_PAGE_SIZE"], cfg["MAX_PAGE_SIZE"])
    return jsonify({"success": True, "data": _service().most_borrowed(limit)})


@book_bp.get("/<int:book_id>")
def get_book(book_id: int):
    b = _service().get_book(book_id)
    return jsonify({"success": True, "data": b.to_dict()})


@book_bp.put("/<int:book_id>")
@admin_required
def update_book(book_id: int):
    data = validate_book(json_object(request.get_json(silent=True)))
    b = _service().update_book(book_id, **data)
    return jsonify({"success": True, "message": "Book updated successfully", "data": b.to_dict()})


@book_bp.delete("/<int:book_id>")
@admin_required
def delete_book(book_id: int):
    removed = _service().delete_book(book_id)
    return jsonify({
        "success": True,
        "message": "Book deleted successfully",
        "data": {"id": book_id, "removedBorrowings": removed},
    })
