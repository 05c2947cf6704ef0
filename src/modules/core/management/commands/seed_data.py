from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.listings.constants import ListingState
from modules.listings.models import Listing, ListingVariation
from modules.orders.constants import Carrier, OrderStatus
from modules.orders.models import Order, OrderItem, TrackingEvent
from modules.sellers.models import Seller


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        seller = self._seed_seller()
        listings = self._seed_listings(seller)
        orders_created = self._seed_orders(seller, listings)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"listings={len(listings)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        seed_users = [
            ("admin", "admin123", {"is_staff": True, "is_superuser": True}),
            ("raven", "raven123", {"email": "raven@example.com"}),
            ("buyer", "buyer123", {"email": "buyer@example.com"}),
        ]
        for username, password, extra in seed_users:
            if User.objects.filter(username=username).exists():
                continue
            User.objects.create_user(username, password=password, **extra)
            created += 1
        return created

    def _seed_seller(self) -> Seller:
        User = get_user_model()
        seller, _ = Seller.objects.get_or_create(
            user=User.objects.get(username="raven"),
            defaults={
                "shop_name": "Nevermore Curiosities",
                "description": "Victorian mourning jewellery and oddities.",
            },
        )
        return seller

    def _seed_listings(self, seller: Seller) -> list[Listing]:
        self.stdout.write("Creating listings...")
        listings: list[Listing] = []
        catalog = [
            ("NVM-001", "Jet Mourning Brooch", Decimal("89.00"), 12),
            ("NVM-002", "Raven Skull Candle", Decimal("24.50"), 3),
            ("NVM-003", "Bat Wing Earrings", Decimal("32.00"), 0),
            ("NVM-004", "Memento Mori Locket", Decimal("145.00"), 5),
            ("NVM-005", "Apothecary Bottle Set", Decimal("58.00"), 40),
            ("NVM-006", "Velvet Coffin Box", Decimal("76.00"), 1),
            ("NVM-007", "Moth Specimen Frame", Decimal("120.00"), 8),
            ("NVM-008", "Black Lace Gloves", Decimal("29.00"), 0),
        ]
        for sku, title, price, stock in catalog:
            listing, created = Listing.objects.get_or_create(
                sku=sku,
                seller=seller,
                defaults={
                    "title": title,
                    "price": price,
                    "stock_quantity": stock,
                    "low_stock_threshold": 5,
                    "state": ListingState.PUBLISHED,
                },
            )
            if created and sku == "NVM-008":
                for size in ("S", "M", "L"):
                    ListingVariation.objects.create(
                        listing=listing,
                        name=size,
                        sku=f"{sku}-{size}",
                        stock_quantity=random.randint(0, 6),
                    )
            listings.append(listing)
        self.stdout.write(self.style.SUCCESS("Creating listings... Done!"))
        return listings

    def _seed_orders(self, seller: Seller, listings: list[Listing]) -> int:
        self.stdout.write("Creating orders...")
        buyer = get_user_model().objects.get(username="buyer")
        statuses = [
            OrderStatus.PENDING,
            OrderStatus.PAID,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ]
        orders_created = 0

        for i in range(20):
            status = random.choice(statuses)
            order, created = Order.objects.get_or_create(
                buyer=buyer,
                seller=seller,
                notes=f"Seed order {i + 1}",
                defaults={
                    "status": status,
                    "shipping_address": {
                        "name": "Morticia A.",
                        "line1": "0001 Cemetery Lane",
                        "city": "Salem",
                        "country": "US",
                    },
                },
            )
            if not created:
                continue

            created_at = timezone.now() - timedelta(days=random.randint(0, 30))
            subtotal = Decimal("0.00")
            for listing in random.sample(listings, k=random.randint(1, 3)):
                quantity = random.randint(1, 2)
                OrderItem.objects.create(
                    order=order,
                    listing=listing,
                    title=listing.title,
                    price=listing.price,
                    quantity=quantity,
                )
                subtotal += listing.price * quantity

            updates = {
                "created_at": created_at,
                "subtotal": subtotal,
                "shipping_cost": Decimal("6.00"),
                "total": subtotal + Decimal("6.00"),
            }
            if status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
                carrier = random.choice(list(Carrier))
                updates.update(
                    carrier=carrier,
                    tracking_number=f"9400{random.randint(10**11, 10**12 - 1)}",
                    shipped_at=created_at + timedelta(days=2),
                )
                TrackingEvent.objects.create(
                    order=order,
                    status=OrderStatus.SHIPPED,
                    description=f"Shipped via {carrier}",
                    carrier=carrier,
                    timestamp=created_at + timedelta(days=2),
                )
            if status == OrderStatus.DELIVERED:
                updates["delivered_at"] = created_at + timedelta(days=7)
            Order.objects.filter(id=order.id).update(**updates)
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
