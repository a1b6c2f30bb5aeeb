from sqlalchemy import Column, Integer, String, Float, Numeric, Text, CheckConstraint

from app.database import Base
from app.models.types import UTCDateTime


class ProductModel(Base):
    """
    Table definition for catalog products.

    The storer talks to ``__table__`` through SQLAlchemy Core, so this class
    only describes columns and constraints.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    image = Column(String(255), nullable=False, default="")
    category = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    rating = Column(Float, nullable=False, default=0)
    num_reviews = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    count_in_stock = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("count_in_stock >= 0", name="check_count_in_stock_non_negative"),
    )

    def __repr__(self):
        return f"<ProductModel(id={self.id}, name='{self.name}', count_in_stock={self.count_in_stock})>"
