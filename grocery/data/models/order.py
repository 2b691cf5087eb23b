from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from grocery.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_full_name = Column(String(100), nullable=False)
    user_email = Column(String(255), nullable=False)

    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    delivery_address = Column(JSON, nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String(20), nullable=False)  # cash, online
    payment_status = Column(String(20), nullable=False, default="pending")
    status = Column(String(20), nullable=False, default="pending")

    tx_ref = Column(String(255), nullable=True, unique=True)
    gateway_transaction_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
