from django.apps import AppConfig


class ListingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.listings"
    label = "listings"

    def ready(self) -> None:
        from modules.listings.events import LowStockReached, StockLevelChanged
        from modules.listings.handlers import (
            low_stock_reached_handler,
            stock_level_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(StockLevelChanged, stock_level_changed_handler)
        event_bus.subscribe(LowStockReached, low_stock_reached_handler)
