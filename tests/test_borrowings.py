from datetime import datetime, timedelta


def _book(client, headers, book_id):
    return client.get(f"/api/books/{book_id}", headers=headers).get_json()["data"]


def test_borrow_decrements_availability(client, admin_headers, make_book, borrow):
    book = make_book(quantity=2)

    r = borrow(book["id"])
    assert r.status_code == 201
    loan = r.get_json()["data"]
    assert loan["status"] == "borrowed"
    assert loan["return_date"] is None
    assert loan["student"] == {"id": 42, "name": "Ada Student", "email": "ada@example.com"}
    assert loan["due_date"].startswith("2030-01-15")

    assert _book(client, admin_headers, book["id"])["available_quantity"] == 1


def test_borrow_unavailable_book_mutates_nothing(client, admin_headers, make_book, borrow):
    book = make_book(quantity=1)
    assert borrow(book["id"]).status_code == 201

    r = borrow(book["id"], student_id=7)
    assert r.status_code == 400
    assert "not available" in r.get_json()["message"]

    assert _book(client, admin_headers, book["id"])["available_quantity"] == 0
    loans = client.get("/api/borrowings", headers=admin_headers).get_json()["data"]
    assert len(loans) == 1


def test_borrow_validation(client, admin_headers, make_book, borrow):
    book = make_book()

    r = client.post("/api/borrowings", json={"book_id": book["id"]}, headers=admin_headers)
    assert r.status_code == 400
    assert "student_id" in r.get_json()["message"]

    r = borrow(book["id"], due_date="next tuesday")
    assert r.status_code == 400

    r = borrow(999)
    assert r.status_code == 404


def test_lifecycle_scenario(client, admin_headers, make_book, borrow):
    book = make_book(quantity=3)
    assert book["available_quantity"] == 3

    first = borrow(book["id"]).get_json()["data"]
    borrow(book["id"], student_id=7)
    assert _book(client, admin_headers, book["id"])["available_quantity"] == 1

    r = client.put(f"/api/borrowings/{first['id']}/return", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "returned"
    assert r.get_json()["data"]["return_date"]
    assert _book(client, admin_headers, book["id"])["available_quantity"] == 2

    r = client.delete(f"/api/books/{book['id']}", headers=admin_headers)
    assert r.status_code == 400


def test_double_return_is_a_conflict(client, admin_headers, make_book, borrow):
    book = make_book(quantity=2)
    loan = borrow(book["id"]).get_json()["data"]

    assert client.put(f"/api/borrowings/{loan['id']}/return", headers=admin_headers).status_code == 200
    r = client.put(f"/api/borrowings/{loan['id']}/return", headers=admin_headers)
    assert r.status_code == 400
    assert "already been returned" in r.get_json()["message"]

    assert _book(client, admin_headers, book["id"])["available_quantity"] == 2


def test_return_missing_borrowing(client, admin_headers):
    r = client.put("/api/borrowings/999/return", headers=admin_headers)
    assert r.status_code == 404


def test_delete_outstanding_borrowing_restocks(client, admin_headers, make_book, borrow):
    book = make_book(quantity=2)
    loan = borrow(book["id"]).get_json()["data"]

    r = client.delete(f"/api/borrowings/{loan['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["restocked"] is True
    assert _book(client, admin_headers, book["id"])["available_quantity"] == 2

    r = client.delete(f"/api/borrowings/{loan['id']}", headers=admin_headers)
    assert r.status_code == 404


def test_delete_returned_borrowing_leaves_stock(client, admin_headers, make_book, borrow):
    book = make_book(quantity=2)
    loan = borrow(book["id"]).get_json()["data"]
    client.put(f"/api/borrowings/{loan['id']}/return", headers=admin_headers)

    r = client.delete(f"/api/borrowings/{loan['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["restocked"] is False
    assert _book(client, admin_headers, book["id"])["available_quantity"] == 2


def test_admin_listing_is_newest_first_and_enriched(client, admin_headers, make_book, borrow):
    book = make_book(quantity=3, cover_image="cover.png")
    older = borrow(book["id"]).get_json()["data"]
    newer = borrow(book["id"], student_id=7).get_json()["data"]

    data = client.get("/api/borrowings", headers=admin_headers).get_json()["data"]
    assert [x["id"] for x in data] == [newer["id"], older["id"]]
    assert data[0]["book"] == {
        "id": book["id"],
        "title": "Test Book",
        "author": "Author",
        "cover_image": "cover.png",
    }
    assert data[0]["student"]["id"] == 7


def test_student_listing_is_scoped_to_caller(client, admin_headers, student_headers, make_book, borrow):
    book = make_book(quantity=3)
    mine = borrow(book["id"], student_id=42).get_json()["data"]
    borrow(book["id"], student_id=7)

    r = client.get("/api/borrowings/student", headers=student_headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert [x["id"] for x in data] == [mine["id"]]
    assert "student" not in data[0]
    assert data[0]["book"]["title"] == "Test Book"


def test_mark_overdue_labels_only_late_outstanding_loans(client, admin_headers, make_book, borrow):
    book = make_book(quantity=3)
    yesterday = (datetime.utcnow() - timedelta(days=1)).date().isoformat()
    late = borrow(book["id"], due_date=yesterday).get_json()["data"]
    borrow(book["id"], due_date="2099-01-01")
    returned = borrow(book["id"], due_date=yesterday).get_json()["data"]
    client.put(f"/api/borrowings/{returned['id']}/return", headers=admin_headers)

    r = client.post("/api/borrowings/mark-overdue", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["marked"] == 1

    statuses = {x["id"]: x["status"] for x in client.get("/api/borrowings", headers=admin_headers).get_json()["data"]}
    assert statuses[late["id"]] == "overdue"
    assert statuses[returned["id"]] == "returned"

    # overdue loans can still be returned
    r = client.put(f"/api/borrowings/{late['id']}/return", headers=admin_headers)
    assert r.get_json()["data"]["status"] == "returned"


def test_borrowing_management_requires_admin(client, student_headers, make_book, borrow):
    book = make_book()
    loan = borrow(book["id"]).get_json()["data"]

    assert client.get("/api/borrowings", headers=student_headers).status_code == 403
    assert client.post("/api/borrowings", json={}, headers=student_headers).status_code == 403
    assert client.put(f"/api/borrowings/{loan['id']}/return", headers=student_headers).status_code == 403
    assert client.delete(f"/api/borrowings/{loan['id']}", headers=student_headers).status_code == 403
    assert client.post("/api/borrowings/mark-overdue", headers=student_headers).status_code == 403
