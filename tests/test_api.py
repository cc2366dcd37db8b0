from __future__ import annotations

import pytest

from api.app import create_app
from clarity.config import Settings
from clarity.exceptions import PersistenceError
from clarity.storage import MemoryBlobStore


class FailingBlobStore(MemoryBlobStore):
    def set(self, key, value):
        raise PersistenceError("disk full")


@pytest.fixture
def client():
    app = create_app(Settings(env="dev"), blobs=MemoryBlobStore())
    app.config["TESTING"] = True
    return app.test_client()


def _post(client, **overrides):
    payload = {"description": "Coffee", "amount": "4.50", "category": "Food", "date": "2024-01-05"}
    payload.update(overrides)
    return client.post("/expenses", json=payload)


def test_categories(client):
    assert client.get("/categories").get_json()["items"][0] == "Food"


def test_create_and_list(client):
    created = _post(client)
    assert created.status_code == 201
    _post(client, description="Bus", amount=2.75, category="Transportation", date="2024-01-06")
    body = client.get("/expenses").get_json()
    assert body["count"] == 2
    assert body["total"] == "7.25"
    assert [item["description"] for item in body["items"]] == ["Bus", "Coffee"]


def test_list_applies_filters(client):
    _post(client)
    _post(client, description="Bus", amount="2.75", category="Transportation", date="2024-01-06")
    body = client.get("/expenses?search=COF&from=2024-01-01&to=2024-01-05").get_json()
    assert [item["description"] for item in body["items"]] == ["Coffee"]
    body = client.get("/expenses?category=Transportation").get_json()
    assert [item["description"] for item in body["items"]] == ["Bus"]


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"description": "  "}, "empty_description"),
        ({"date": ""}, "missing_date"),
        ({"amount": "-5"}, "invalid_amount"),
        ({"date": "2024-02-31"}, "invalid_date"),
        ({"category": "Travel"}, "invalid_category"),
    ],
)
def test_validation_errors(client, overrides, code):
    response = _post(client, **overrides)
    assert response.status_code == 400
    assert response.get_json()["code"] == code
    assert client.get("/expenses").get_json()["count"] == 0


def test_non_json_body_is_rejected(client):
    response = client.post("/expenses", data="description=Coffee")
    assert response.status_code == 400


def test_get_update_delete(client):
    expense_id = _post(client).get_json()["id"]
    assert client.get(f"/expenses/{expense_id}").get_json()["description"] == "Coffee"

    response = client.put(
        f"/expenses/{expense_id}",
        json={"description": "Latte", "amount": "5", "category": "Food", "date": "2024-01-07"},
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] == expense_id
    assert body["description"] == "Latte"

    assert client.delete(f"/expenses/{expense_id}").status_code == 204
    assert client.delete(f"/expenses/{expense_id}").status_code == 204
    assert client.get(f"/expenses/{expense_id}").status_code == 404


def test_update_unknown_id_is_a_no_op(client):
    response = client.put(
        "/expenses/missing",
        json={"description": "Latte", "amount": "5", "category": "Food", "date": "2024-01-07"},
    )
    assert response.status_code == 204


def test_summary(client):
    _post(client)
    _post(client, description="Bus", amount="2.75", category="Transportation", date="2024-01-06")
    body = client.get("/summary?today=2024-01-20").get_json()
    assert body["total_spent"] == "7.25"
    assert body["monthly_spent"] == "7.25"
    assert body["top_category"] == {"category": "Food", "total": "4.50"}
    assert client.get("/summary?today=someday").status_code == 400


def test_export_download(client):
    _post(client)
    _post(client, description="Bus", amount="2.75", category="Transportation", date="2024-01-06")
    response = client.get("/export")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "filename=expenses.csv" in response.headers["Content-Disposition"]
    assert response.get_data(as_text=True) == (
        'Description,Amount,Category,Date\n'
        '"Bus","2.75","Transportation","2024-01-06"\n'
        '"Coffee","4.50","Food","2024-01-05"'
    )


def test_export_empty_ledger(client):
    assert client.get("/export").status_code == 404


def test_persistence_failure_is_reported():
    app = create_app(Settings(), blobs=FailingBlobStore())
    response = app.test_client().post(
        "/expenses",
        json={"description": "Coffee", "amount": "4.50", "category": "Food", "date": "2024-01-05"},
    )
    assert response.status_code == 500
    assert response.get_json()["error"] == "Persistence error"
