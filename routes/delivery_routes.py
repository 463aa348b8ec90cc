from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from core.authorization import require_permission
from core.dependencies import CurrentUser
from core.security import login_user
from models.delivery import AvailabilityOut, AvailabilityUpdate
from models.order import OrderEnvelope, OrderOnBehalfCreate, OrderOut, OrderStatusUpdate
from models.user import Role, UserCreate, UserEnvelope, UserLogin, UserOut
from services import order_service, user_service
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Delivery_Route")

router = APIRouter(prefix="/delivery", tags=["Delivery"])

delivery_self = Depends(require_permission("delivery", "self"))

@router.post("/register", response_model=UserEnvelope)
async def register_personnel(user: UserCreate, response: Response):
    # role is implied by the endpoint
    created = await user_service.create_user(user, role=Role.DELIVERY, extra={"is_available": False})
    login_user(response, created, settings.REGISTER_TOKEN_EXPIRE_HOURS)
    return {"message": "Delivery personnel registered successfully!", "data": created}

@router.post("/login", response_model=UserOut)
async def login_personnel(credentials: UserLogin, response: Response):
    user = await user_service.authenticate(credentials.email_id, credentials.password, allowed_roles={Role.DELIVERY})
    login_user(response, user, settings.LOGIN_TOKEN_EXPIRE_HOURS)
    return user

@router.get("/orders", response_model=List[OrderOut])
async def get_available_orders(current_user: CurrentUser = delivery_self):
    """Orders in preparation that nobody has picked up yet."""
    return await order_service.list_available_orders()

@router.put("/orders/{order_id}/accept", response_model=OrderOut)
async def accept_order(order_id: str, current_user: CurrentUser = Depends(require_permission("order", "deliver"))):
    return await order_service.accept_order(order_id, current_user.id)

@router.put("/orders/{order_id}/status", response_model=OrderOut)
async def update_delivery_status(order_id: str, payload: OrderStatusUpdate,
                                 current_user: CurrentUser = Depends(require_permission("order", "deliver"))):
    return await order_service.update_delivery_status(order_id, payload.order_status, current_user)

@router.put("/availability", response_model=AvailabilityOut)
async def set_availability(payload: AvailabilityUpdate, current_user: CurrentUser = delivery_self):
    return await user_service.set_availability(current_user.id, payload.is_available)

@router.post("/placeOrder", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def place_order(payload: OrderOnBehalfCreate,
                      current_user: CurrentUser = Depends(require_permission("order", "place_on_behalf"))):
    order = await order_service.create_order_on_behalf(payload.user_id, payload, current_user.email_id)
    return {"message": "Order placed successfully", "order": order}

@router.get("/delivery-personnel", response_model=List[UserOut])
async def get_all_delivery_personnel(
    available: Optional[bool] = Query(None),
    current_user: CurrentUser = Depends(require_permission("delivery", "list_personnel"))
):
    return await user_service.list_delivery_personnel(available)
