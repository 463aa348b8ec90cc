from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from core.authorization import require_permission, require_self_or_admin
from core.dependencies import CurrentUser, get_current_user
from core.exceptions import ValidationError
from core.security import clear_token_cookie, login_user
from models.address import AddressEnvelope, DeliveryAddressIn, DeliveryAddressOut
from models.admin import MessageResponse
from models.order import OrderCreate, OrderEnvelope, OrderOut, OrderTracking
from models.restaurant import RestaurantOut
from models.user import Role, UserCreate, UserEnvelope, UserLogin, UserOut
from services import address_service, order_service, restaurant_service, user_service
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Customer_Route")

router = APIRouter(prefix="/customer", tags=["Customer"])

@router.post("/register", response_model=UserEnvelope)
async def register_customer(user: UserCreate, response: Response):
    if user.role != Role.CUSTOMER:
        raise ValidationError("Invalid role")
    created = await user_service.create_user(user, role=Role.CUSTOMER)
    login_user(response, created, settings.REGISTER_TOKEN_EXPIRE_HOURS)
    return {"message": "Customer registered successfully!", "data": created}

@router.post("/login", response_model=UserOut)
async def login_customer(credentials: UserLogin, response: Response):
    user = await user_service.authenticate(credentials.email_id, credentials.password, allowed_roles={Role.CUSTOMER})
    login_user(response, user, settings.LOGIN_TOKEN_EXPIRE_HOURS)
    return user

@router.post("/logout", response_model=MessageResponse)
async def logout_customer(response: Response, current_user: CurrentUser = Depends(get_current_user)):
    clear_token_cookie(response)
    await user_service.touch_last_active(current_user.id)
    return {"message": "Logout successful!"}

# ---- delivery addresses ----

@router.get("/users/{user_id}/delivery-addresses", response_model=List[DeliveryAddressOut],
            dependencies=[Depends(require_permission("address", "manage_own"))])
async def list_delivery_addresses(user_id: str, current_user: CurrentUser = Depends(require_self_or_admin)):
    return await address_service.list_addresses(user_id)

@router.post("/users/{user_id}/delivery-addresses", response_model=AddressEnvelope, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_permission("address", "manage_own"))])
async def add_delivery_address(user_id: str, payload: DeliveryAddressIn,
                               current_user: CurrentUser = Depends(require_self_or_admin)):
    """
    Seven fields are mandatory. Setting isDefault clears the user's previous default.
    """
    address = await address_service.create_address(user_id, payload)
    return {"message": "Delivery address added successfully", "address": address}

@router.put("/users/{user_id}/delivery-addresses/{address_id}", response_model=AddressEnvelope,
            dependencies=[Depends(require_permission("address", "manage_own"))])
async def update_delivery_address(user_id: str, address_id: str, payload: DeliveryAddressIn,
                                  current_user: CurrentUser = Depends(require_self_or_admin)):
    address = await address_service.update_address(user_id, address_id, payload)
    return {"message": "Address updated successfully", "address": address}

@router.delete("/users/{user_id}/delivery-addresses/{address_id}", response_model=MessageResponse,
               dependencies=[Depends(require_permission("address", "manage_own"))])
async def delete_delivery_address(user_id: str, address_id: str,
                                  current_user: CurrentUser = Depends(require_self_or_admin)):
    return await address_service.delete_address(user_id, address_id)

# ---- restaurant discovery ----

@router.get("/restaurants", response_model=List[RestaurantOut])
async def browse_restaurants(current_user: CurrentUser = Depends(require_permission("restaurant", "browse"))):
    return await restaurant_service.list_restaurants()

@router.get("/restaurants/search", response_model=List[RestaurantOut])
async def search_restaurants(
    query: Optional[str] = Query(None, description="Matched against menu item names"),
    filter: Optional[str] = Query(None, description="Matched against the cuisine type"),
    current_user: CurrentUser = Depends(require_permission("restaurant", "browse"))
):
    return await restaurant_service.search_restaurants(query, filter)

# ---- orders ----

@router.post("/orders", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def place_order(order: OrderCreate, current_user: CurrentUser = Depends(require_permission("order", "place"))):
    """Create a new order for the logged in customer"""
    logger.info(f"Received request to create order by user: {current_user.id}")
    new_order = await order_service.create_order(current_user.id, order)
    return {"message": "Order placed successfully", "order": new_order}

@router.get("/orders/history", response_model=List[OrderOut])
async def order_history(current_user: CurrentUser = Depends(require_permission("order", "track"))):
    return await order_service.order_history(current_user.id)

@router.get("/orders/{order_id}/track", response_model=OrderTracking)
async def track_order(order_id: str, current_user: CurrentUser = Depends(require_permission("order", "track"))):
    return await order_service.track_order(current_user.id, order_id)
