import os
import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.core.errors import ValidationError
from app.core.parsing import parse_amount, parse_date, parse_flag, parse_int


def test_parse_int_accepts_form_strings():
    assert parse_int("quantity", " 12 ") == 12
    assert parse_int("quantity", 3.0) == 3
    for bad in (True, "1.5", "", None, 2.5, []):
        with pytest.raises(ValidationError):
            parse_int("quantity", bad)
    with pytest.raises(ValidationError) as excinfo:
        parse_int("quantity", 0, minimum=1)
    assert excinfo.value.reason == "must be at least 1"
    assert parse_int("quantity", 2**31 - 1, maximum=2**31 - 1) == 2**31 - 1
    with pytest.raises(ValidationError) as too_big:
        parse_int("quantity", 10**20)
    assert too_big.value.reason.startswith("must be at most")


def test_parse_amount_cleans_currency():
    assert parse_amount("unit_price", "$1,250.50") == pytest.approx(1250.5)
    assert parse_amount("unit_price", Decimal("2.25")) == pytest.approx(2.25)
    assert parse_amount("unit_price", 0, positive=False) == 0
    for bad in ("", "abc", "nan", "sNaN", "-Infinity", Decimal("sNaN"), 0, -1, False):
        with pytest.raises(ValidationError):
            parse_amount("unit_price", bad)


def test_parse_date_and_flag():
    assert parse_date("sale_date", "2024-03-05") == date(2024, 3, 5)
    assert parse_date("sale_date", "2024-03-05T10:00:00Z") == date(2024, 3, 5)
    assert parse_date("sale_date", datetime(2024, 3, 5, 9, 30)) == date(2024, 3, 5)
    with pytest.raises(ValidationError):
        parse_date("sale_date", "tomorrow")

    assert parse_flag("on") is True
    assert parse_flag("off") is False
    assert parse_flag(None) is False
