# routes/restaurant_routes.py
from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from core.authorization import require_permission, require_self_or_admin
from core.dependencies import CurrentUser
from core.security import login_user
from models.admin import MessageResponse
from models.menu import MenuItemCreate, MenuItemEnvelope, MenuItemOut, MenuItemUpdate, MenuListEnvelope
from models.order import OrderOut, OrderStatus, OrderStatusUpdate
from models.restaurant import (
    RestaurantCreate, RestaurantEnvelope, RestaurantListEnvelope, RestaurantOut,
    RestaurantRegistrationEnvelope, RestaurantSignup, RestaurantUpdate
)
from models.user import Role, UserOut, UserLogin
from services import menu_service, order_service, restaurant_service, user_service
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Restaurant_Route")
router = APIRouter(prefix="/restaurant", tags=["Restaurant"])

manage_restaurant = Depends(require_permission("restaurant", "manage"))
manage_menu = Depends(require_permission("menu", "manage"))

@router.post("/register", response_model=RestaurantRegistrationEnvelope)
async def register_restaurant(payload: RestaurantSignup, response: Response):
    """
    Create a restaurant account and its first restaurant in one call.
    The account role is always "restaurant".
    """
    user = await user_service.create_user(payload, role=Role.RESTAURANT)
    restaurant = await restaurant_service.create_restaurant(
        user["id"], RestaurantCreate.model_validate(payload.model_dump()), actor_email=user["email_id"]
    )
    login_user(response, user, settings.REGISTER_TOKEN_EXPIRE_HOURS)
    return {"message": "Restaurant registered successfully!", "data": {"user": user, "restaurant": restaurant}}

@router.post("/register/{user_id}", response_model=RestaurantEnvelope, status_code=status.HTTP_201_CREATED,
             dependencies=[manage_restaurant])
async def register_restaurant_for_user(user_id: str, payload: RestaurantCreate,
                                       current_user: CurrentUser = Depends(require_self_or_admin)):
    restaurant = await restaurant_service.create_restaurant_for_user(user_id, payload, actor_email=current_user.email_id)
    return {"message": "Restaurant added successfully!", "data": restaurant}

@router.post("/login", response_model=UserOut)
async def login_restaurant(credentials: UserLogin, response: Response):
    user = await user_service.authenticate(credentials.email_id, credentials.password, allowed_roles={Role.RESTAURANT})
    login_user(response, user, settings.LOGIN_TOKEN_EXPIRE_HOURS)
    return user

@router.get("/{user_id}", response_model=RestaurantListEnvelope, dependencies=[manage_restaurant])
async def get_restaurants_of_user(user_id: str, current_user: CurrentUser = Depends(require_self_or_admin)):
    restaurants = await restaurant_service.list_restaurants_by_owner(user_id)
    return {"message": "Restaurant Found !!!", "data": restaurants}

@router.patch("/{restaurant_id}", response_model=RestaurantOut)
async def update_restaurant(restaurant_id: str, payload: RestaurantUpdate, current_user: CurrentUser = manage_restaurant):
    return await restaurant_service.update_restaurant(restaurant_id, payload, current_user)

# ---- menu ----

@router.get("/menu/{user_id}/{restaurant_id}", response_model=MenuListEnvelope, dependencies=[manage_menu])
async def get_menu(user_id: str, restaurant_id: str,
                   available: bool = Query(False, description="Only items currently on offer"),
                   current_user: CurrentUser = Depends(require_self_or_admin)):
    items = await menu_service.list_menu_items(restaurant_id, current_user, only_available=available)
    return {"message": "List of all items in Menu", "data": items}

@router.post("/item/{user_id}", response_model=MenuItemEnvelope, status_code=status.HTTP_201_CREATED,
             dependencies=[manage_menu])
async def add_menu_item(user_id: str, payload: MenuItemCreate, current_user: CurrentUser = Depends(require_self_or_admin)):
    item = await menu_service.create_menu_item(payload, current_user)
    return {"message": "Item added Successfully!!!", "data": item}

@router.patch("/item/{item_id}", response_model=MenuItemOut)
async def update_menu_item(item_id: str, payload: MenuItemUpdate, current_user: CurrentUser = manage_menu):
    """Only itemName, description, price and availability can be changed."""
    return await menu_service.update_menu_item(item_id, payload, current_user)

@router.delete("/item/{user_id}/{menu_item_id}", response_model=MessageResponse, dependencies=[manage_menu])
async def delete_menu_item(user_id: str, menu_item_id: str, current_user: CurrentUser = Depends(require_self_or_admin)):
    return await menu_service.delete_menu_item(menu_item_id, current_user)

# ---- orders ----

@router.get("/orders/{user_id}/{restaurant_id}/{status}", response_model=List[OrderOut],
            dependencies=[Depends(require_permission("order", "update_status"))])
async def get_orders_by_status(user_id: str, restaurant_id: str, status: OrderStatus,
                               current_user: CurrentUser = Depends(require_self_or_admin)):
    return await order_service.list_restaurant_orders(restaurant_id, status, current_user)

@router.patch("/order/{order_id}", response_model=OrderOut)
async def update_order_status(order_id: str, payload: OrderStatusUpdate,
                              current_user: CurrentUser = Depends(require_permission("order", "update_status"))):
    logger.info(f"Status update request for {order_id} -> {payload.order_status.value} from {current_user.email_id}")
    return await order_service.update_status_by_restaurant(order_id, payload.order_status, current_user)
