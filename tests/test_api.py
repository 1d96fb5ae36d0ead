import json

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from billsportal.db import init_db, insert_bill
from billsportal.main import app, get_bill_store, get_session, settings
from billsportal.models import SessionUser
from billsportal.store import SqliteStore

from conftest import FILE_URL


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_store(client):
    def _use(store):
        app.dependency_overrides[get_bill_store] = lambda: store
        return store
    return _use


def test_health(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["ok"] is True


def test_bills_page_renders_sorted_table(client, use_store, make_store, bills):
    use_store(make_store(bills))

    response = client.get("/bills")

    assert response.status_code == status.HTTP_200_OK
    body = response.text
    assert 'data-testid="tbody"' in body
    assert body.index("4 Avr. 04") < body.index("3 Mar. 03") < body.index("2 Fév. 02") < body.index("1 Jan. 01")
    assert "active-icon" in body


@pytest.mark.parametrize("message, code", [("Erreur 404", 404), ("Erreur 500", 500)])
def test_bills_page_shows_store_error(client, use_store, failing_store, message, code):
    use_store(failing_store(message, code))

    response = client.get("/bills")

    assert response.status_code == code
    assert message in response.text


def test_new_bill_page(client):
    response = client.get("/bills/new")
    assert response.status_code == status.HTTP_200_OK
    assert 'data-testid="form-new-bill"' in response.text


def test_receipt_preview(client, use_store, make_store, bills):
    use_store(make_store(bills))

    response = client.get("/bills/47qAXb6fIm2zOKkLzMro/receipt")

    assert response.status_code == status.HTTP_200_OK
    assert "modal fade show" in response.text
    assert 'alt="Bill"' in response.text
    assert FILE_URL.split("?")[0] in response.text


def test_receipt_preview_unknown_bill(client, use_store, make_store, bills):
    use_store(make_store(bills))
    response = client.get("/bills/nope/receipt")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_api_list_bills(client, use_store, make_store, bills):
    use_store(make_store(bills))

    response = client.get("/api/bills")

    assert response.status_code == status.HTTP_200_OK
    items = response.json()["items"]
    assert [i["date"] for i in items] == ["4 Avr. 04", "3 Mar. 03", "2 Fév. 02", "1 Jan. 01"]
    assert [i["status"] for i in items] == ["En attente", "Accepté", "Refusé", "Refusé"]


def test_api_list_bills_store_error(client, use_store, failing_store):
    use_store(failing_store("Erreur 500", 500))
    response = client.get("/api/bills")
    assert response.status_code == 500
    assert response.json()["detail"] == "Erreur 500"


def test_api_create_and_update_with_sqlite(client, use_store, tmp_path):
    path = str(tmp_path / "bills.sqlite3")
    init_db(path)
    use_store(SqliteStore(path, "a@a"))

    created = client.post("/api/bills", json={
        "email": "a@a",
        "type": "Restaurants et bars",
        "name": "lunch",
        "amount": 18.5,
        "date": "2023-03-01",
    })
    assert created.status_code == status.HTTP_200_OK
    bill_id = created.json()["id"]

    updated = client.patch(f"/api/bills/{bill_id}", json={"status": "accepted"})
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["status"] == "accepted"

    missing = client.patch("/api/bills/unknown", json={"status": "accepted"})
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["detail"] == "Erreur 404"


def test_api_create_rejects_invalid_payload(client, use_store, make_store):
    use_store(make_store([]))
    response = client.post("/api/bills", json={"name": "no amount"})
    assert response.status_code == 422


def test_bills_page_scopes_store_to_session_user(client, tmp_path, bills, monkeypatch):
    path = str(tmp_path / "bills.sqlite3")
    init_db(path)
    for b in bills:
        insert_bill(b, path)
    insert_bill({"id": "other", "email": "b@b", "name": "someone else", "date": "2024-01-01", "status": "pending"}, path)
    monkeypatch.setattr(settings, "db_path", path)
    monkeypatch.setattr(settings, "store", "sqlite")

    user = json.dumps({"type": "Employee", "email": "a@a"})
    response = client.get("/bills", headers={"Cookie": f"user={user}"})

    assert response.status_code == status.HTTP_200_OK
    assert "someone else" not in response.text
    assert "encore" in response.text


def test_session_from_cookie_json():
    assert SessionUser.from_json('{"type": "Employee", "email": "a@a"}') == SessionUser(type="Employee", email="a@a")
    assert SessionUser.from_json("not json") is None
    assert SessionUser.from_json(None) is None
    assert SessionUser.from_json("[1, 2]") is None


def test_get_session_override_reaches_page(client, use_store, make_store):
    use_store(make_store([]))
    app.dependency_overrides[get_session] = lambda: SessionUser(email="a@a")
    response = client.get("/bills")
    assert response.status_code == status.HTTP_200_OK
