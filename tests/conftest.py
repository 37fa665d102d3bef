import pytest
from flask_jwt_extended import create_access_token

from books_service import create_app, dispose_store
from books_service.config import TestConfig
from books_service.extensions import db


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.drop_all()
    dispose_store(app)


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


def _bearer(app, user_id, role):
    with app.app_context():
        token = create_access_token(identity=str(user_id), additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app):
    return _bearer(app, 1, "admin")


@pytest.fixture
def student_headers(app):
    return _bearer(app, 42, "student")


@pytest.fixture
def make_category(client, admin_headers):
    def _make(name="Roman"):
        r = client.post("/api/categories", json={"name": name}, headers=admin_headers)
        assert r.status_code == 201, r.get_json()
        return r.get_json()["data"]
    return _make


@pytest.fixture
def make_book(client, admin_headers, make_category):
    def _make(quantity=1, category_id=None, **fields):
        if category_id is None:
            category_id = make_category(fields.pop("category_name", "Roman"))["id"]
        payload = {"title": "Test Book", "author": "Author", "category_id": category_id, "quantity": quantity}
        payload.update(fields)
        r = client.post("/api/books", json=payload, headers=admin_headers)
        assert r.status_code == 201, r.get_json()
        return r.get_json()["data"]
    return _make


@pytest.fixture
def borrow(client, admin_headers):
    def _borrow(book_id, student_id=42, due_date="2030-01-15"):
        return client.post("/api/borrowings", json={
            "book_id": book_id,
            "student_id": student_id,
            "student_name": "Ada Student",
            "student_email": "ada@example.com",
            "due_date": due_date,
        }, headers=admin_headers)
    return _borrow
