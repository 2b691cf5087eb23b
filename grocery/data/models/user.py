from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime

from grocery.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone_number = Column(String(20), nullable=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(String(20), nullable=False, default="customer")  # customer, seller, admin
    status = Column(String(20), nullable=False, default="Active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
