from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String

from grocery.data.database import Base


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    description = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    street = Column(String(255), nullable=False)
    district = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=True)
    phone_number = Column(String(20), nullable=True)
    additional_info = Column(String(500), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (Index("ix_addresses_user_default", "user_id", "is_default"),)

    def snapshot(self) -> dict:
        return {
            "description": self.description,
            "city": self.city,
            "street": self.street,
            "district": self.district,
            "postal_code": self.postal_code,
            "phone_number": self.phone_number,
            "additional_info": self.additional_info,
        }
