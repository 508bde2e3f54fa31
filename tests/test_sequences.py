"""Tests for the id counters behind purchase and sale numbers."""

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.db.session import Base
from app.crud.items import get_item
from app.crud.purchases import create_purchase
from app.crud.sequences import PURCHASE_SEQUENCE, SALE_SEQUENCE, format_id, next_id, next_purchase_id
from app.models.item import Item
from app.models.vendor import Vendor

from app.models import customer as customer_model  # noqa: F401
from app.models import purchase as purchase_model  # noqa: F401
from app.models import sale as sale_model  # noqa: F401
from app.models import sequence as sequence_model  # noqa: F401

CREATED = "2024-01-01T00:00:00Z"


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def test_counter_starts_at_one_and_increments(db_session):
    assert next_id(db_session, PURCHASE_SEQUENCE) == 1
    assert next_id(db_session, PURCHASE_SEQUENCE) == 2
    db_session.commit()
    assert next_id(db_session, PURCHASE_SEQUENCE) == 3


def test_counters_are_independent(db_session):
    next_id(db_session, PURCHASE_SEQUENCE)
    next_id(db_session, PURCHASE_SEQUENCE)

    assert next_id(db_session, SALE_SEQUENCE) == 1


def test_rolled_back_allocation_is_reissued(db_session):
    assert next_purchase_id(db_session) == "PUR0001"
    db_session.rollback()

    assert next_purchase_id(db_session) == "PUR0001"


def test_format_id_pads_without_truncating():
    assert format_id("PUR", 7) == "PUR0007"
    assert format_id("SALE", 42) == "SALE0042"
    assert format_id("PUR", 12345) == "PUR12345"
    assert format_id("PUR", 3, width=6) == "PUR000003"


def test_concurrent_purchases_get_distinct_contiguous_ids(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    SessionFactory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    with SessionFactory() as setup:
        setup.add_all(
            [
                Item(item_number=3001, item_name="Cable", stock=0, created_at=CREATED),
                Vendor(full_name="Wire Co", phone_mobile="555-0123", address="9 Spool Ave", created_at=CREATED),
            ]
        )
        setup.commit()
        vendor_id = setup.query(Vendor.id).scalar()

    def buy(_):
        with SessionFactory() as session:
            purchase = create_purchase(
                session,
                item_number=3001,
                vendor_id=vendor_id,
                purchase_date="2024-04-01",
                quantity=1,
                unit_price=2,
            )
            return purchase.purchase_id

    count = 12
    with ThreadPoolExecutor(max_workers=6) as pool:
        ids = list(pool.map(buy, range(count)))

    assert len(set(ids)) == count
    assert sorted(ids) == [format_id("PUR", n) for n in range(1, count + 1)]
    with SessionFactory() as check:
        assert get_item(check, 3001).stock == count
    engine.dispose()
