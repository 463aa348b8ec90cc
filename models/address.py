from typing import Optional
from datetime import datetime
from models.base import ApiModel

class DeliveryAddressIn(ApiModel):
    """
    Every field is optional at the schema level; mandatory fields are
    checked by the service so the caller gets the name of the missing one.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    is_default: Optional[bool] = None

class DeliveryAddressOut(ApiModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    country: str
    postal_code: str
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class AddressEnvelope(ApiModel):
    message: str
    address: DeliveryAddressOut
