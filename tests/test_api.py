import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app import create_app
from app.core.config import settings
from app.db.session import get_db
from app.models.customer import Customer
from app.models.item import Item
from app.models.vendor import Vendor

CREATED = "2024-01-01T00:00:00Z"


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    application = create_app(bind=engine, instrument=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db

    with TestingSessionLocal() as seed:
        seed.add_all(
            [
                Item(item_number=501, item_name="Stapler", stock=2, discount_percent=5, created_at=CREATED),
                Vendor(full_name="Office Depot", phone_mobile="555-0150", address="5 Paper Ln", created_at=CREATED),
                Customer(customer_id="CUST0007", full_name="Front Desk", phone_mobile="555-0177", created_at=CREATED),
            ]
        )
        seed.commit()

    with TestClient(application) as test_client:
        yield test_client


def test_purchase_lifecycle_over_http(client):
    created = client.post(
        "/api/v1/purchases",
        json={"item_number": 501, "vendor_id": 1, "purchase_date": "2024-05-01", "quantity": 3, "unit_price": 7.5},
        headers={"X-Actor": "dana"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["purchase_id"] == "PUR0001"
    assert body["total_cost"] == pytest.approx(22.5)
    assert body["created_by"] == "anonymous:dana"
    assert "X-Request-ID" in created.headers

    reconcile = client.get("/api/v1/items/501/reconcile").json()
    assert reconcile["stock"] == 5
    assert reconcile["ledger_quantity"] == 3

    patched = client.patch("/api/v1/purchases/PUR0001", json={"quantity": 1})
    assert patched.status_code == 200
    assert patched.json()["total_cost"] == pytest.approx(7.5)

    listing = client.get("/api/v1/purchases", params={"vendor_id": 1})
    assert [p["purchase_id"] for p in listing.json()] == ["PUR0001"]

    deleted = client.delete("/api/v1/purchases/PUR0001")
    assert deleted.json() == {"status": "deleted", "purchase_id": "PUR0001"}
    assert client.get("/api/v1/items/501/reconcile").json()["stock"] == 2


def test_insufficient_stock_uses_error_envelope(client):
    response = client.post(
        "/api/v1/sales",
        json={
            "item_number": 501,
            "customer_id": "CUST0007",
            "sale_date": "2024-05-02",
            "quantity": 3,
            "unit_price": 12,
        },
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "insufficient_stock"
    assert body["details"]["available"] == 2
    assert body["details"]["requested"] == 3


def test_sale_with_discount_and_dashboard(client):
    client.post(
        "/api/v1/purchases",
        json={"item_number": 501, "vendor_id": 1, "purchase_date": "2024-05-01", "quantity": 4, "unit_price": 10},
    )
    sold = client.post(
        "/api/v1/sales",
        json={
            "item_number": 501,
            "customer_id": "CUST0007",
            "sale_date": "2024-05-02",
            "quantity": 2,
            "unit_price": 20,
            "apply_discount": True,
        },
    )
    assert sold.status_code == 201
    assert sold.json()["sale_id"] == "SALE0001"
    assert sold.json()["total"] == pytest.approx(38.0)

    dashboard = client.get("/api/v1/dashboard").json()
    assert dashboard["total_cost"] == pytest.approx(40.0)
    assert dashboard["total_revenue"] == pytest.approx(38.0)
    assert dashboard["items"][0]["profit"] == pytest.approx(18.0)

    report = client.get("/api/v1/reports/sales", params={"start_date": "2024-05-01", "end_date": "2024-05-31"})
    assert report.status_code == 200
    assert [row["sale_id"] for row in report.json()["rows"]] == ["SALE0001"]


def test_missing_records_and_bad_input(client):
    missing = client.delete("/api/v1/sales/SALE0404")
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"
    assert missing.json()["details"] == {"entity_type": "Sale", "key": "SALE0404"}

    invalid = client.post(
        "/api/v1/purchases",
        json={"item_number": 501, "vendor_id": 1, "purchase_date": "2024-05-01", "quantity": 0, "unit_price": 3},
    )
    assert invalid.status_code == 422
    assert invalid.json()["details"]["field"] == "quantity"

    oversized = client.post(
        "/api/v1/purchases",
        json={"item_number": 501, "vendor_id": 1, "purchase_date": "2024-05-01", "quantity": 10**20, "unit_price": 3},
    )
    assert oversized.status_code == 422
    assert oversized.json()["code"] == "validation_error"

    malformed = client.post("/api/v1/purchases", json={"item_number": "abc"})
    assert malformed.status_code == 422
    assert malformed.json()["code"] == "validation_error"


def test_api_key_is_enforced_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "s3cret")

    assert client.get("/api/v1/sales").status_code == 401
    assert client.get("/api/v1/sales", headers={"X-API-Key": "wrong"}).json()["code"] == "http_error"
    assert client.get("/api/v1/sales", headers={"X-API-Key": "s3cret"}).status_code == 200
    assert client.get("/health").status_code == 200
