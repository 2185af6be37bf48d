from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

# Import Base from database module to ensure consistency
from database import Base


def utcnow():
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Account(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash, never plain text
    role = Column(
        SAEnum(Role, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
        default=Role.USER,
    )
    created_at = Column(DateTime, default=utcnow)

    donations = relationship("DonationReceived", back_populates="account", passive_deletes=True)
    requests = relationship("DonationRequest", back_populates="account", passive_deletes=True)


class DonationReceived(Base):
    __tablename__ = "donations_received"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(Text, default="")
    date = Column(DateTime, default=utcnow)

    account = relationship("Account", back_populates="donations")


class DonationRequest(Base):
    __tablename__ = "donation_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_type = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False)
    reason = Column(Text, default="")
    status = Column(
        SAEnum(RequestStatus, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
        default=RequestStatus.PENDING,
    )
    date = Column(DateTime, default=utcnow)

    account = relationship("Account", back_populates="requests")


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    size = Column(String(20), default="")
    last_updated = Column(DateTime, default=utcnow, onupdate=utcnow)
