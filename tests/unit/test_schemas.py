from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ValidationError
import pytest

from booking_api.schemas.base import Money
from booking_api.schemas.booking import CancelledBookingOut
from booking_api.services.booking_service import CancelledBooking


class Priced(BaseModel):
    price: Money


class TestMoney:
    @pytest.mark.parametrize("raw", [10, 75.5, "0", "19.99", Decimal("99999999.99")])
    def test_accepts_column_sized_amounts(self, raw):
        assert Priced(price=raw).price == Decimal(str(raw))

    @pytest.mark.parametrize(
        "raw", ["abc", "", "NaN", "sNaN", "Infinity", "-inf", "1.005", "100000000"]
    )
    def test_rejects_malformed_or_oversized_amounts(self, raw):
        with pytest.raises(ValidationError):
            Priced(price=raw)

    def test_serializes_as_float(self):
        assert Priced(price="12.50").model_dump(mode="json") == {"price": 12.5}


def test_cancelled_booking_serializes_date_key():
    cancelled = CancelledBooking(
        id="b1", service_id="s1", availability_id="a1", booking_date=date(2030, 1, 2)
    )

    body = CancelledBookingOut.model_validate(cancelled).model_dump(mode="json")

    assert body == {
        "id": "b1",
        "service_id": "s1",
        "availability_id": "a1",
        "date": "2030-01-02",
    }
