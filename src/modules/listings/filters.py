"""ORM counterparts of the predicates in ``modules.listings.stock``."""

from __future__ import annotations

import django_filters
from django.db.models import F, Q

from modules.listings.constants import ListingState, StockFilter
from modules.listings.models import Listing

IN_STOCK_Q = Q(stock_quantity__gt=F("low_stock_threshold"))
LOW_STOCK_Q = Q(stock_quantity__gt=0, stock_quantity__lte=F("low_stock_threshold"))
OUT_OF_STOCK_Q = Q(stock_quantity=0)

STOCK_FILTER_Q = {
    StockFilter.LOW: LOW_STOCK_Q,
    StockFilter.OUT: OUT_OF_STOCK_Q,
}


class ListingFilter(django_filters.FilterSet):
    """Seller inventory filters; every supplied filter must match (AND)."""

    search = django_filters.CharFilter(method="filter_search")
    state = django_filters.ChoiceFilter(choices=ListingState.choices)
    stock = django_filters.ChoiceFilter(
        choices=StockFilter.choices, method="filter_stock"
    )

    class Meta:
        model = Listing
        fields = ["search", "state", "stock"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(sku__icontains=value))

    def filter_stock(self, queryset, name, value):
        condition = STOCK_FILTER_Q.get(value)
        return queryset.filter(condition) if condition is not None else queryset
