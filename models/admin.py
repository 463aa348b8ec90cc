# models/admin.py
from typing import Any, Dict, List, Optional
from models.base import ApiModel
from models.order import OrderOut

class MessageResponse(ApiModel):
    message: str

class PopularRestaurant(ApiModel):
    restaurant_id: str
    order_count: int
    restaurant_info: Dict[str, Any]

class AverageDeliveryTime(ApiModel):
    # minutes
    average_delivery_time: float

class OrderTrendPoint(ApiModel):
    period: str
    order_count: int

class ActiveUserCount(ApiModel):
    active_user_count: int

class DeliveryActivity(ApiModel):
    active_delivery_count: int
    active_deliveries: List[OrderOut]

class OrderStatusCount(ApiModel):
    order_status: Optional[str] = None
    count: int
