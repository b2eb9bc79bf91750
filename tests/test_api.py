from datetime import date


def _reserve(client, headers, book_external_id, rental_days=7, **extra):
    body = {"book_external_id": book_external_id, "rental_days": rental_days}
    body.update(extra)
    return client.post("/reservations/", json=body, headers=headers)


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


def test_register_login_and_me(client):
    res = client.post("/auth/register", json={
        "name": "Juan Perez", "username": "juan", "email": "juan@example.com", "password": "pw"
    })
    assert res.status_code == 201
    assert res.get_json()["data"]["role"] == "user"

    dup = client.post("/auth/register", json={
        "name": "Other", "username": "juan", "email": "x@example.com", "password": "pw"
    })
    assert dup.status_code == 400

    bad = client.post("/auth/login", json={"username": "juan", "password": "nope"})
    assert bad.status_code == 401

    login = client.post("/auth/login", json={"username": "juan", "password": "pw"})
    token = login.get_json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["name"] == "Juan Perez"


def test_register_requires_fields(client):
    res = client.post("/auth/register", json={"username": "x"})
    assert res.status_code == 400


def test_books_admin_only_writes(client, make_user, auth_header):
    admin = make_user(role="admin")
    user = make_user()
    payload = {"external_id": 11, "title": "Dune", "price": "20.00", "stock_quantity": 2}

    assert client.post("/books/", json=payload, headers=auth_header(user)).status_code == 403

    res = client.post("/books/", json=payload, headers=auth_header(admin))
    assert res.status_code == 201
    assert res.get_json()["data"]["available_quantity"] == 2

    assert client.get("/books/11").get_json()["data"]["title"] == "Dune"
    assert client.get("/books/12").status_code == 404

    upd = client.put("/books/11", json={"price": "25.50"}, headers=auth_header(admin))
    assert upd.get_json()["data"]["price"] == "25.50"

    missing = client.post("/books/", json={"title": "No id"}, headers=auth_header(admin))
    assert missing.status_code == 400


def test_create_reservation_endpoint(client, make_user, make_book, auth_header):
    user = make_user(name="Juan Perez")
    book = make_book(price="15.99", available=5)

    res = _reserve(client, auth_header(user), book.external_id, rental_days=2, start_date="2026-01-01")

    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["user_id"] == user.id
    assert data["user_name"] == "Juan Perez"
    assert data["book_title"] == "The Lord of the Rings"
    assert data["total_fee"] == "31.98"
    assert data["expected_return_date"] == "2026-01-03"
    assert data["status"] == "ACTIVE"
    assert client.get(f"/books/{book.external_id}").get_json()["data"]["available_quantity"] == 4


def test_create_reservation_defaults_start_date_to_today(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book()

    data = _reserve(client, auth_header(user), book.external_id, rental_days=1).get_json()["data"]

    assert data["start_date"] == date.today().isoformat()


def test_create_reservation_validation(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book()
    headers = auth_header(user)

    assert client.post("/reservations/", json={"rental_days": 3}, headers=headers).status_code == 400
    assert _reserve(client, headers, book.external_id, rental_days=0).status_code == 400
    assert _reserve(client, headers, book.external_id, rental_days="x").status_code == 400
    assert _reserve(client, headers, book.external_id, start_date="01/02/2026").status_code == 400


def test_create_reservation_errors(client, make_user, make_book, auth_header):
    user = make_user()
    other = make_user()
    admin = make_user(role="admin")
    empty = make_book(external_id=1, available=0)

    assert _reserve(client, auth_header(user), 999).status_code == 404

    res = _reserve(client, auth_header(user), empty.external_id)
    assert res.status_code == 409
    assert res.get_json()["success"] is False

    assert _reserve(client, auth_header(user), empty.external_id, user_id=other.id).status_code == 403
    assert _reserve(client, auth_header(admin), empty.external_id, user_id=12345).status_code == 404

    assert client.post("/reservations/", json={}).status_code == 401


def test_admin_reserves_for_another_user(client, make_user, make_book, auth_header):
    admin = make_user(role="admin")
    user = make_user(name="Reader")
    book = make_book()

    res = _reserve(client, auth_header(admin), book.external_id, user_id=user.id)

    assert res.status_code == 201
    assert res.get_json()["data"]["user_name"] == "Reader"


def test_return_endpoint(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book(price="100.00", available=1)
    headers = auth_header(user)
    created = _reserve(client, headers, book.external_id, rental_days=7, start_date="2026-01-01").get_json()["data"]

    res = client.post(f"/reservations/{created['id']}/return", json={"return_date": "2026-01-11"}, headers=headers)

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["status"] == "OVERDUE"
    assert data["late_fee"] == "45.00"
    assert data["actual_return_date"] == "2026-01-11"
    assert client.get(f"/books/{book.external_id}").get_json()["data"]["available_quantity"] == 1

    again = client.post(f"/reservations/{created['id']}/return", json={}, headers=headers)
    assert again.status_code == 409


def test_return_endpoint_checks_owner(client, make_user, make_book, auth_header):
    owner = make_user()
    stranger = make_user()
    admin = make_user(role="admin")
    book = make_book()
    created = _reserve(client, auth_header(owner), book.external_id).get_json()["data"]
    url = f"/reservations/{created['id']}/return"

    assert client.post(url, json={}, headers=auth_header(stranger)).status_code == 403
    assert client.post("/reservations/999/return", json={}, headers=auth_header(owner)).status_code == 404

    res = client.post(url, json={}, headers=auth_header(admin))
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "RETURNED"


def test_read_endpoints(client, make_user, make_book, auth_header):
    user = make_user()
    stranger = make_user()
    admin = make_user(role="admin")
    book = make_book()
    created = _reserve(client, auth_header(user), book.external_id, start_date="2020-01-01").get_json()["data"]

    assert client.get(f"/reservations/{created['id']}", headers=auth_header(user)).status_code == 200
    assert client.get(f"/reservations/{created['id']}", headers=auth_header(stranger)).status_code == 403
    assert client.get("/reservations/999", headers=auth_header(admin)).status_code == 404

    mine = client.get("/reservations/my", headers=auth_header(user)).get_json()["data"]
    assert [r["id"] for r in mine] == [created["id"]]
    assert client.get("/reservations/my", headers=auth_header(stranger)).get_json()["data"] == []

    for path in ["/reservations/", "/reservations/active", "/reservations/overdue", f"/reservations/user/{user.id}"]:
        assert client.get(path, headers=auth_header(user)).status_code == 403
        res = client.get(path, headers=auth_header(admin))
        assert res.status_code == 200
        assert [r["id"] for r in res.get_json()["data"]] == [created["id"]]


def test_run_overdue_check_endpoint(client, make_user, make_book, auth_header):
    user = make_user()
    admin = make_user(role="admin")
    book = make_book()
    _reserve(client, auth_header(user), book.external_id, rental_days=1, start_date="2020-01-01")

    assert client.post("/notifications/run-overdue-check", headers=auth_header(user)).status_code == 403

    res = client.post("/notifications/run-overdue-check", headers=auth_header(admin))
    assert res.status_code == 200
    assert res.get_json()["data"]["sent"] == 1


def test_create_reservation_rejects_huge_rental_days(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book()

    res = _reserve(client, auth_header(user), book.external_id, rental_days=5000000)

    assert res.status_code == 400
    assert "rental_days" in res.get_json()["message"]


def test_create_reservation_rejects_non_integer_values(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book(available=5)
    headers = auth_header(user)

    assert _reserve(client, headers, book.external_id, rental_days=2.7).status_code == 400
    assert _reserve(client, headers, book.external_id, rental_days=True).status_code == 400
    assert _reserve(client, headers, float(book.external_id)).status_code == 400
    assert client.get(f"/books/{book.external_id}").get_json()["data"]["available_quantity"] == 5


def test_create_reservation_null_user_id_means_caller(client, make_user, make_book, auth_header):
    user = make_user()
    book = make_book()

    res = _reserve(client, auth_header(user), book.external_id, user_id=None)

    assert res.status_code == 201
    assert res.get_json()["data"]["user_id"] == user.id
