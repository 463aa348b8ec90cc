from pydantic import Field
from typing import Optional
from datetime import datetime
from models.base import ApiModel

class MenuItemCreate(ApiModel):
    restaurant: str
    item_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    availability: bool = True

class MenuItemUpdate(ApiModel):
    item_name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    availability: Optional[bool] = None

class MenuItemOut(ApiModel):
    id: str
    restaurant: str
    item_name: str
    description: Optional[str] = None
    price: float
    availability: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class MenuItemEnvelope(ApiModel):
    message: str
    data: MenuItemOut

class MenuListEnvelope(ApiModel):
    message: str
    data: list[MenuItemOut]
