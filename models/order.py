from enum import Enum
from pydantic import Field, computed_field
from typing import Dict, FrozenSet, List, Optional
from datetime import datetime
from models.base import ApiModel
from core.exceptions import InvalidStatusTransition

class OrderStatus(str, Enum):
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "OutForDelivery"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    RESCHEDULED = "Rescheduled"

# target status -> statuses it may be reached from
ALLOWED_PREDECESSORS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PREPARING: frozenset({OrderStatus.RESCHEDULED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.PREPARING, OrderStatus.RESCHEDULED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.CANCELLED: frozenset(OrderStatus),
    OrderStatus.RESCHEDULED: frozenset({
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.RESCHEDULED,
        OrderStatus.CANCELLED,
    }),
}

def can_transition(current, target) -> bool:
    try:
        current = OrderStatus(current)
    except ValueError:
        return False
    return current in ALLOWED_PREDECESSORS[OrderStatus(target)]

def ensure_transition(current, target) -> OrderStatus:
    """Raise InvalidStatusTransition unless `current -> target` is in the table."""
    if not can_transition(current, target):
        raise InvalidStatusTransition(str(getattr(current, "value", current)), OrderStatus(target).value)
    return OrderStatus(target)

class OrderItem(ApiModel):
    item_id: str
    quantity: int = Field(1, gt=0)
    price: Optional[float] = Field(None, ge=0)

class OrderCreate(ApiModel):
    restaurant_id: str
    items: List[OrderItem] = Field(..., min_length=1)
    delivery_address_id: Optional[str] = None
    date: Optional[datetime] = None

class OrderOnBehalfCreate(OrderCreate):
    user_id: str

class OrderStatusUpdate(ApiModel):
    order_status: OrderStatus

class OrderReschedule(ApiModel):
    new_date: datetime

class OrderOut(ApiModel):
    id: str
    user_id: str
    restaurant_id: str
    items: List[OrderItem]
    delivery_address_id: Optional[str] = None
    delivery_person_id: Optional[str] = None
    order_status: OrderStatus
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def status(self) -> OrderStatus:
        return self.order_status

class OrderEnvelope(ApiModel):
    message: str
    order: OrderOut

class OrderTracking(ApiModel):
    status: OrderStatus

class PaginatedOrderResponse(ApiModel):
    data: List[OrderOut]
    page: int
    total_pages: int
    total_orders: int
