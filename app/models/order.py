from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint

from app.database import Base
from app.models.types import UTCDateTime


class OrderModel(Base):
    """
    Table definition for the parent row of an order aggregate.

    Attributes:
        id: Store-assigned identifier
        user_id: Owning user
        payment_method: Free-form payment label
        tax_price, shipping_price, total_price: Caller-computed amounts, stored verbatim
        created_at: Set once on insert
        updated_at: NULL until the order is updated
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    payment_method = Column(String(64), nullable=False)
    tax_price = Column(Numeric(10, 2), nullable=False)
    shipping_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=True)

    def __repr__(self):
        return f"<OrderModel(id={self.id}, user_id={self.user_id})>"


class OrderItemModel(Base):
    """
    Table definition for order line items.

    ``product_id`` is not a foreign key. Products have their own lifecycle.
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    image = Column(String(255), nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    product_id = Column(Integer, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_quantity_positive"),
    )

    def __repr__(self):
        return f"<OrderItemModel(id={self.id}, order_id={self.order_id}, product_id={self.product_id})>"
