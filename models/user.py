from enum import Enum
from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from models.base import ApiModel
from utils.validation import validate_strong_password

class Role(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"
    RESTAURANT = "restaurant"
    DELIVERY = "delivery"

class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class UserCreate(ApiModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email_id: EmailStr
    password: str
    role: Role = Role.CUSTOMER
    gender: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, value: str) -> str:
        return validate_strong_password(value)

class UserLogin(ApiModel):
    email_id: EmailStr
    password: str

class UserUpdate(ApiModel):
    # the only fields an admin may patch
    phone_number: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: Optional[UserStatus] = None

class UserOut(ApiModel):
    id: str
    first_name: str
    last_name: Optional[str] = None
    email_id: str
    role: Role
    gender: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    phone_number: Optional[str] = None
    is_available: Optional[bool] = None
    last_active_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserEnvelope(ApiModel):
    message: str
    data: UserOut

class UserPage(ApiModel):
    data: List[UserOut]
    page: int
    total_pages: int
    total_users: int
