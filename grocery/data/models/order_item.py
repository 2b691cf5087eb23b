from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from grocery.data.database import Base


class OrderItemModel(Base):
    """Immutable snapshot of a cart line, decoupled from the live product row."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, nullable=False)

    product_name = Column(String(255), nullable=False)
    unit = Column(String(20), nullable=False, default="pcs")
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    product_image = Column(String(500), nullable=True)

    order = relationship("OrderModel", back_populates="items")

    @property
    def subtotal(self):
        return self.price * self.quantity
