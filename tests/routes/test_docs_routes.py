from __future__ import annotations


def test_openapi_document_lists_every_route(client):
    resp = client.get("/openapi.json")
    assert resp.status_code == 200
    doc = resp.get_json()

    assert doc["openapi"] == "3.0.3"
    assert doc["info"]["title"] == "Library API"
    assert "bearerAuth" in doc["components"]["securitySchemes"]
    for path in (
        "/users/register",
        "/books",
        "/books/{bookId}",
        "/books/search",
        "/borrowings/borrow",
        "/borrowings/return",
        "/borrowings/stats",
    ):
        assert path in doc["paths"]
    assert set(doc["paths"]["/books/{bookId}"]) == {"get", "put", "delete"}
    assert "removedBorrowings" in doc["paths"]["/books/{bookId}"]["delete"]["description"]


def test_swagger_ui_served_at_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"swagger-ui" in resp.data


def test_cors_headers_on_api_responses(client):
    resp = client.get("/health", headers={"Origin": "http://frontend.example"})
    assert resp.headers["Access-Control-Allow-Origin"] in ("*", "http://frontend.example")
