from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
import re

from config import settings
from models import Role, RequestStatus

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def _required_text(v: str, message: str) -> str:
    if not v or not v.strip():
        raise ValueError(message)
    return v.strip()


def _check_email(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError('Email is required')
    if len(v) > 100 or not EMAIL_PATTERN.match(v):
        raise ValueError('Invalid email format')
    return v


def _check_new_password(v: str) -> str:
    if len(v) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {settings.MIN_PASSWORD_LENGTH} characters')
    if len(v.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes')
    return v


# ============================================
# Accounts
# ============================================

class RegisterRequest(BaseModel):
    username: str = Field(max_length=50)
    email: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return _required_text(v, 'Username is required')

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_new_password(v)


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return _required_text(v, 'Username and password are required')

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        # Compared as typed; registration stores it unstripped
        if not v or not v.strip():
            raise ValueError('Username and password are required')
        return v


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str

    @field_validator('currentPassword')
    @classmethod
    def validate_current_password(cls, v):
        if not v:
            raise ValueError('Both passwords are required')
        return v

    @field_validator('newPassword')
    @classmethod
    def validate_new_password(cls, v):
        if not v:
            raise ValueError('Both passwords are required')
        return _check_new_password(v)


class AccountUpdate(BaseModel):
    username: str = Field(max_length=50)
    email: str
    role: Optional[str] = None

    @field_validator('username', 'email')
    @classmethod
    def validate_required(cls, v):
        return _required_text(v, 'Username and email are required')

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v is None or v == '':
            return None
        if v not in {r.value for r in Role}:
            raise ValueError('Invalid role')
        return v


class AccountRead(BaseModel):
    id: int
    username: str
    email: str
    role: Role
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ============================================
# Donations
# ============================================

class DonationCreate(BaseModel):
    amount: int = Field(strict=True)
    description: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError('Valid amount is required')
        return v


class DonationRead(BaseModel):
    id: int
    user_id: int
    amount: int
    description: Optional[str] = None
    date: Optional[datetime] = None
    username: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DonationRequestCreate(BaseModel):
    item_type: str = Field(max_length=50)
    quantity: int = Field(strict=True)
    reason: Optional[str] = None

    @field_validator('item_type')
    @classmethod
    def validate_item_type(cls, v):
        return _required_text(v, 'Item type and valid quantity are required')

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        if v <= 0:
            raise ValueError('Item type and valid quantity are required')
        return v


class DonationRequestStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in {s.value for s in RequestStatus}:
            raise ValueError('Invalid status')
        return v


class DonationRequestRead(BaseModel):
    id: int
    user_id: int
    item_type: str
    quantity: int
    reason: Optional[str] = None
    status: RequestStatus
    date: Optional[datetime] = None
    username: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ============================================
# Inventory
# ============================================

class InventoryItemWrite(BaseModel):
    item_name: str = Field(max_length=100)
    category: str = Field(max_length=50)
    quantity: Optional[int] = Field(default=0, strict=True)
    size: Optional[str] = Field(default=None, max_length=20)

    @field_validator('item_name', 'category')
    @classmethod
    def validate_required(cls, v):
        return _required_text(v, 'Item name and category are required')

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        if v is not None and v < 0:
            raise ValueError('Quantity cannot be negative')
        return v


class InventoryItemRead(BaseModel):
    id: int
    item_name: str
    category: str
    quantity: int
    size: Optional[str] = None
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
