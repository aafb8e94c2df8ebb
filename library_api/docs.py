"""OpenAPI document served by flask-smorest.

Swagger UI lives at ``/`` and the raw document at ``/openapi.json``. The
blueprints are plain Flask ones, so paths are written out here and merged
into the generated document through ``spec_kwargs``.
"""
import copy

from flask_smorest import Api


def _ok(description, schema=None):
    body = {"description": description}
    if schema:
        body["content"] = {"application/json": {"schema": schema}}
    return body


def _json_body(schema):
    return {"required": True, "content": {"application/json": {"schema": schema}}}


_ERROR = {"$ref": "#/components/schemas/ApiError"}
_BEARER = [{"bearerAuth": []}]
_PAGING = [
    {"name": "page", "in": "query", "schema": {"type": "integer", "default": 1}},
    {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 10, "maximum": 100}},
]
_BOOK_ID = {"name": "bookId", "in": "path", "required": True, "schema": {"type": "integer"}}

_ERRORS = {
    "400": _ok("Invalid input or conflict", _ERROR),
    "401": _ok("Missing or invalid token", _ERROR),
}
_ADMIN_ERRORS = {**_ERRORS, "403": _ok("Admin access required", _ERROR)}

OPENAPI_TEMPLATE = {
    "info": {"description": "Users, books and borrowing operations"},
    "components": {
        "securitySchemes": {
            "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
        },
        "schemas": {
            "ApiError": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {"type": "string", "example": "conflict"},
                    "message": {"type": "string"},
                    "errors": {"type": "array", "items": {"type": "string"}},
                    "bookIds": {"type": "array", "items": {"type": "integer"}},
                    "borrowingIds": {"type": "array", "items": {"type": "integer"}},
                },
            },
            "Credentials": {
                "type": "object",
                "required": ["username", "password"],
                "properties": {
                    "username": {"type": "string", "minLength": 3, "maxLength": 30},
                    "password": {"type": "string", "minLength": 6},
                },
            },
            "BookInput": {
                "type": "object",
                "required": ["title", "author", "genre", "publishedYear"],
                "properties": {
                    "title": {"type": "string", "maxLength": 255},
                    "author": {"type": "string", "maxLength": 255},
                    "genre": {"type": "string", "maxLength": 100},
                    "publishedYear": {"type": "integer", "minimum": 1000},
                },
            },
            "Book": {
                "allOf": [
                    {"$ref": "#/components/schemas/BookInput"},
                    {
                        "type": "object",
                        "properties": {
                            "id": {"type": "integer"},
                            "createdAt": {"type": "string", "format": "date-time"},
                        },
                    },
                ],
            },
            "Borrowing": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "userId": {"type": "integer"},
                    "bookId": {"type": "integer"},
                    "borrowDate": {"type": "string", "format": "date-time"},
                    "returnDate": {"type": "string", "format": "date-time", "nullable": True},
                    "isReturned": {"type": "boolean"},
                    "book": {"$ref": "#/components/schemas/Book"},
                },
            },
        },
    },
    "paths": {
        "/health": {"get": {"tags": ["System"], "summary": "Liveness check", "responses": {"200": _ok("Running")}}},
        "/users/register": {
            "post": {
                "tags": ["Users"],
                "summary": "Register a user and get a token",
                "requestBody": _json_body({"$ref": "#/components/schemas/Credentials"}),
                "responses": {"201": _ok("Registered"), "400": _ok("Invalid input or username taken", _ERROR)},
            },
        },
        "/users/login": {
            "post": {
                "tags": ["Users"],
                "summary": "Log in and get a token",
                "requestBody": _json_body({"$ref": "#/components/schemas/Credentials"}),
                "responses": {"200": _ok("Logged in"), "401": _ok("Invalid credentials", _ERROR)},
            },
        },
        "/users/profile": {
            "get": {
                "tags": ["Users"],
                "summary": "Current user with decrypted notes",
                "security": _BEARER,
                "responses": {"200": _ok("Profile"), **_ERRORS},
            },
        },
        "/users/notes": {
            "post": {
                "tags": ["Users"],
                "summary": "Store encrypted notes",
                "security": _BEARER,
                "requestBody": _json_body({"type": "object", "properties": {"notes": {"type": "string"}}}),
                "responses": {"200": _ok("Saved"), **_ERRORS},
            },
        },
        "/users/promote": {
            "post": {
                "tags": ["Users"],
                "summary": "Grant admin rights",
                "security": _BEARER,
                "requestBody": _json_body({"type": "object", "properties": {"userId": {"type": "integer"}}}),
                "responses": {"200": _ok("Promoted"), **_ADMIN_ERRORS, "404": _ok("User not found", _ERROR)},
            },
        },
        "/books": {
            "get": {
                "tags": ["Books"],
                "summary": "List books by title",
                "parameters": _PAGING,
                "responses": {"200": _ok("Page of books")},
            },
            "post": {
                "tags": ["Books"],
                "summary": "Create a book",
                "security": _BEARER,
                "requestBody": _json_body({"$ref": "#/components/schemas/BookInput"}),
                "responses": {"201": _ok("Created", {"$ref": "#/components/schemas/Book"}), **_ADMIN_ERRORS},
            },
        },
        "/books/search": {
            "get": {
                "tags": ["Books"],
                "summary": "Search title or author",
                "parameters": [{"name": "q", "in": "query", "required": True, "schema": {"type": "string"}}] + _PAGING,
                "responses": {"200": _ok("Page of books"), "400": _ok("Missing query", _ERROR)},
            },
        },
        "/books/stats/most-borrowed": {
            "get": {
                "tags": ["Books"],
                "summary": "Books with the most borrowings",
                "parameters": [_PAGING[1]],
                "responses": {"200": _ok("Books with borrow counts")},
            },
        },
        "/books/{bookId}": {
            "get": {
                "tags": ["Books"],
                "summary": "Get a book",
                "parameters": [_BOOK_ID],
                "responses": {"200": _ok("Book"), "404": _ok("Book not found", _ERROR)},
            },
            "put": {
                "tags": ["Books"],
                "summary": "Replace a book's fields",
                "security": _BEARER,
                "parameters": [_BOOK_ID],
                "requestBody": _json_body({"$ref": "#/components/schemas/BookInput"}),
                "responses": {"200": _ok("Updated"), **_ADMIN_ERRORS, "404": _ok("Book not found", _ERROR)},
            },
            "delete": {
                "tags": ["Books"],
                "summary": "Delete a book that is not currently borrowed",
                "description": (
                    "Returned borrowings of the book are deleted with it and no longer count "
                    "in borrowing stats. `data.removedBorrowings` reports how many were removed."
                ),
                "security": _BEARER,
                "parameters": [_BOOK_ID],
                "responses": {"200": _ok("Deleted"), **_ADMIN_ERRORS, "404": _ok("Book not found", _ERROR)},
            },
        },
        "/borrowings/borrow": {
            "post": {
                "tags": ["Borrowings"],
                "summary": "Borrow several books at once, all or nothing",
                "security": _BEARER,
                "requestBody": _json_body({
                    "type": "object",
                    "properties": {"bookIds": {"type": "array", "items": {"type": "integer"}, "minItems": 1}},
                }),
                "responses": {"201": _ok("Borrowed"), **_ERRORS, "404": _ok("Books not found", _ERROR)},
            },
        },
        "/borrowings/return": {
            "post": {
                "tags": ["Borrowings"],
                "summary": "Return several borrowings at once, all or nothing",
                "security": _BEARER,
                "requestBody": _json_body({
                    "type": "object",
                    "properties": {"borrowingIds": {"type": "array", "items": {"type": "integer"}, "minItems": 1}},
                }),
                "responses": {"200": _ok("Returned"), **_ERRORS, "404": _ok("Borrowings not found", _ERROR)},
            },
        },
        "/borrowings/user": {
            "get": {
                "tags": ["Borrowings"],
                "summary": "Current user's borrowings, newest first",
                "security": _BEARER,
                "parameters": [{"name": "returned", "in": "query", "schema": {"type": "boolean"}}],
                "responses": {"200": _ok("Borrowings", {"type": "array", "items": {"$ref": "#/components/schemas/Borrowing"}}), **_ERRORS},
            },
        },
        "/borrowings/stats": {
            "get": {
                "tags": ["Borrowings"],
                "summary": "Borrowing totals and top five users and books",
                "security": _BEARER,
                "responses": {"200": _ok("Stats"), **_ADMIN_ERRORS},
            },
        },
    },
}

def init_docs(app):
    # Api tek uygulamaya bağlanır; apispec spec_kwargs sözlüğünü yerinde günceller
    return Api(app, spec_kwargs=copy.deepcopy(OPENAPI_TEMPLATE))
