import uuid

import pytest
from pydantic import ValidationError

from modules.listings.constants import ListingState, StockFilter
from modules.listings.dtos import (
    MAX_STOCK_QUANTITY,
    BulkListingUpdateDTO,
    BulkUpdateDTO,
    ListingQueryDTO,
    UpdateStockDTO,
)

pytestmark = pytest.mark.unit


class TestUpdateStockDTO:
    def test_accepts_zero(self):
        assert UpdateStockDTO(quantity=0).quantity == 0

    def test_rejects_negative(self):
        with pytest.raises(ValidationError, match="Stock quantity cannot be negative"):
            UpdateStockDTO(quantity=-1)

    def test_rejects_boolean(self):
        with pytest.raises(ValidationError):
            UpdateStockDTO(quantity=True)

    def test_rejects_fractional(self):
        with pytest.raises(ValidationError):
            UpdateStockDTO(quantity=2.5)

    def test_accepts_column_maximum(self):
        assert UpdateStockDTO(quantity=MAX_STOCK_QUANTITY).quantity == MAX_STOCK_QUANTITY

    def test_rejects_above_column_maximum(self):
        with pytest.raises(ValidationError, match="less than or equal to"):
            UpdateStockDTO(quantity=MAX_STOCK_QUANTITY + 1)

    def test_is_frozen(self):
        dto = UpdateStockDTO(quantity=3)
        with pytest.raises(ValidationError):
            dto.quantity = 4


class TestBulkUpdateDTO:
    def test_parses_wire_payload(self):
        listing_id = uuid.uuid4()
        dto = BulkUpdateDTO.model_validate(
            {"updates": [{"id": str(listing_id), "lowStockThreshold": 2}]}
        )
        update = dto.updates[0]
        assert update.id == listing_id
        assert update.changes() == {"low_stock_threshold": 2}

    def test_state_change(self):
        update = BulkListingUpdateDTO(id=uuid.uuid4(), state="suspended")
        assert update.changes() == {"state": ListingState.SUSPENDED}

    def test_rejects_empty_updates(self):
        with pytest.raises(ValidationError, match="Select at least one listing"):
            BulkUpdateDTO(updates=[])

    def test_rejects_update_without_changes(self):
        with pytest.raises(ValidationError, match="Each update needs one of"):
            BulkUpdateDTO.model_validate({"updates": [{"id": str(uuid.uuid4())}]})

    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError):
            BulkUpdateDTO.model_validate(
                {"updates": [{"id": str(uuid.uuid4()), "price": "1.00"}]}
            )

    def test_rejects_unknown_state(self):
        with pytest.raises(ValidationError):
            BulkListingUpdateDTO(id=uuid.uuid4(), state="archived")

    def test_rejects_negative_threshold(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            BulkListingUpdateDTO(id=uuid.uuid4(), lowStockThreshold=-3)

    def test_rejects_threshold_above_column_maximum(self):
        with pytest.raises(ValidationError):
            BulkListingUpdateDTO(
                id=uuid.uuid4(), lowStockThreshold=MAX_STOCK_QUANTITY + 1
            )

    def test_rejects_duplicate_ids(self):
        listing_id = str(uuid.uuid4())
        with pytest.raises(ValidationError, match="Duplicate listing IDs"):
            BulkUpdateDTO.model_validate(
                {
                    "updates": [
                        {"id": listing_id, "state": "draft"},
                        {"id": listing_id, "state": "published"},
                    ]
                }
            )


class TestListingQueryDTO:
    def test_defaults(self):
        query = ListingQueryDTO()
        assert query.search == ""
        assert query.state is None
        assert query.stock == StockFilter.ALL

    def test_all_state_means_any(self):
        assert ListingQueryDTO(state="all").state is None

    def test_strips_search(self):
        assert ListingQueryDTO(search="  raven ").search == "raven"

    def test_rejects_unknown_stock_filter(self):
        with pytest.raises(ValidationError):
            ListingQueryDTO(stock="plenty")
