"""Builders for storer entities used across tests."""
from datetime import datetime, timezone
from decimal import Decimal

from app.storer.entities import Order, OrderItem, Product


def make_product(**overrides) -> Product:
    data = {
        "name": "Widget",
        "image": "widget.jpg",
        "category": "tools",
        "description": "A useful widget",
        "rating": 4.5,
        "num_reviews": 10,
        "price": Decimal("9.99"),
        "count_in_stock": 50,
        "created_at": datetime.now(timezone.utc),
    }
    data.update(overrides)
    return Product(**data)


def make_order(items=None, **overrides) -> Order:
    if items is None:
        items = [
            OrderItem(name="Widget", quantity=1, image="widget.jpg", price=Decimal("9.99"), product_id=1),
            OrderItem(name="Gadget", quantity=2, image="gadget.jpg", price=Decimal("19.99"), product_id=2),
        ]
    data = {
        "user_id": 1,
        "payment_method": "card",
        "tax_price": Decimal("1.00"),
        "shipping_price": Decimal("2.00"),
        "total_price": Decimal("52.97"),
        "created_at": datetime.now(timezone.utc),
        "items": items,
    }
    data.update(overrides)
    return Order(**data)
