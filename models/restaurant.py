# models/restaurant.py
from pydantic import Field
from typing import Optional
from datetime import datetime
from models.base import ApiModel
from models.user import UserCreate, UserOut

class RestaurantCreate(ApiModel):
    restaurant_name: str = Field(min_length=2)
    address: Optional[str] = None
    cuisine_type: Optional[str] = None
    opening_hours: Optional[str] = None
    delivery_zone: Optional[str] = None

class RestaurantSignup(UserCreate, RestaurantCreate):
    """User and restaurant fields submitted together at self-registration."""
    pass

class RestaurantUpdate(ApiModel):
    restaurant_name: Optional[str] = None
    address: Optional[str] = None
    cuisine_type: Optional[str] = None
    opening_hours: Optional[str] = None
    delivery_zone: Optional[str] = None

class RestaurantOut(ApiModel):
    id: str
    owner: str
    restaurant_name: str
    address: Optional[str] = None
    cuisine_type: Optional[str] = None
    opening_hours: Optional[str] = None
    delivery_zone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RestaurantEnvelope(ApiModel):
    message: str
    data: RestaurantOut

class RestaurantListEnvelope(ApiModel):
    message: str
    data: list[RestaurantOut]

class RestaurantRegistration(ApiModel):
    user: UserOut
    restaurant: RestaurantOut

class RestaurantRegistrationEnvelope(ApiModel):
    message: str
    data: RestaurantRegistration
