"""Unit tests for the stock classification, filtering and counters."""

import pytest

from modules.listings.constants import StockFilter, StockStatus
from modules.listings.stock import (
    InventorySummary,
    classify_stock,
    filter_listings,
    is_in_stock,
    is_low_stock,
    is_out_of_stock,
    matches_search,
    matches_stock_filter,
    summarize,
)

pytestmark = pytest.mark.unit


def _listing(title, stock, threshold=5, sku="", state="published"):
    return {
        "title": title,
        "sku": sku,
        "state": state,
        "stockQuantity": stock,
        "lowStockThreshold": threshold,
    }


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassifyStock:
    def test_at_threshold_is_low_stock(self):
        assert classify_stock(5, 5) == StockStatus.LOW_STOCK
        assert classify_stock(5, 5).label == "Low Stock"

    def test_zero_is_out_of_stock(self):
        assert classify_stock(0, 5) == StockStatus.OUT_OF_STOCK
        assert classify_stock(0, 5).label == "Out of Stock"

    def test_above_threshold_is_in_stock(self):
        assert classify_stock(6, 5) == StockStatus.IN_STOCK
        assert classify_stock(6, 5).label == "In Stock"

    def test_zero_threshold_never_low(self):
        assert classify_stock(1, 0) == StockStatus.IN_STOCK
        assert classify_stock(0, 0) == StockStatus.OUT_OF_STOCK

    @pytest.mark.parametrize("stock", range(0, 12))
    @pytest.mark.parametrize("threshold", [0, 1, 5, 10])
    def test_exactly_one_bucket_matches(self, stock, threshold):
        buckets = [
            is_in_stock(stock, threshold),
            is_low_stock(stock, threshold),
            is_out_of_stock(stock),
        ]
        assert buckets.count(True) == 1


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_low_filter(self):
        assert matches_stock_filter(3, 5, StockFilter.LOW)
        assert not matches_stock_filter(0, 5, StockFilter.LOW)
        assert not matches_stock_filter(6, 5, StockFilter.LOW)

    def test_out_filter(self):
        assert matches_stock_filter(0, 5, StockFilter.OUT)
        assert not matches_stock_filter(1, 5, StockFilter.OUT)

    def test_all_filter_matches_everything(self):
        assert matches_stock_filter(0, 5, StockFilter.ALL)
        assert matches_stock_filter(50, 5, "all")

    def test_search_is_case_insensitive_on_title_and_sku(self):
        assert matches_search("Raven Skull Candle", "", "SKULL")
        assert matches_search("Candle", "NVM-002", "nvm-0")
        assert not matches_search("Candle", "NVM-002", "brooch")
        assert matches_search("Candle", None, "")

    def test_filters_compose_with_and(self):
        listings = [
            _listing("Raven Candle", 2),
            _listing("Raven Brooch", 20),
            _listing("Raven Locket", 0),
            _listing("Bat Candle", 1, state="draft"),
        ]
        selected = filter_listings(listings, search="raven", stock_filter="low")
        assert [item["title"] for item in selected] == ["Raven Candle"]

        drafts = filter_listings(listings, state="draft")
        assert [item["title"] for item in drafts] == ["Bat Candle"]

        everything = filter_listings(listings, state="all")
        assert len(everything) == 4


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


class TestSummarize:
    def test_counts_match_filters(self):
        listings = [
            _listing("a", 0),
            _listing("b", 3),
            _listing("c", 5),
            _listing("d", 6),
            _listing("e", 40),
        ]
        summary = summarize(listings)

        assert summary == InventorySummary(
            total=5, in_stock=2, low_stock=2, out_of_stock=1
        )
        assert summary.low_stock == len(filter_listings(listings, stock_filter="low"))
        assert summary.out_of_stock == len(
            filter_listings(listings, stock_filter="out")
        )

    def test_as_dict_uses_wire_names(self):
        summary = InventorySummary(total=3, in_stock=1, low_stock=1, out_of_stock=1)
        assert summary.as_dict() == {
            "totalProducts": 3,
            "inStock": 1,
            "lowStock": 1,
            "outOfStock": 1,
        }

    def test_accepts_model_attribute_names(self):
        class Row:
            stock_quantity = 2
            low_stock_threshold = 4

        assert summarize([Row()]).low_stock == 1
