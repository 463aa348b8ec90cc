# routes/admin_routes.py
from datetime import datetime
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, Query, Path, Response, status
from core.authorization import require_permission, require_role
from core.dependencies import CurrentUser
from core.exceptions import AuthorizationError
from core.security import clear_token_cookie, login_user
from models.address import AddressEnvelope, DeliveryAddressIn
from models.admin import (
    ActiveUserCount, AverageDeliveryTime, DeliveryActivity, MessageResponse,
    OrderStatusCount, OrderTrendPoint, PopularRestaurant
)
from models.order import OrderEnvelope, OrderOut, OrderReschedule, OrderStatus, PaginatedOrderResponse
from models.user import Role, UserCreate, UserLogin, UserOut, UserPage, UserUpdate
from services import address_service, order_service, report_service, user_service
from settings.config import settings
from utils.logger import get_logger

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger("Admin_Route")

# ---- session ----

@router.post("/login", response_model=MessageResponse)
async def admin_login(credentials: UserLogin, response: Response):
    user = await user_service.authenticate(credentials.email_id, credentials.password, allowed_roles={Role.ADMIN})
    login_user(response, user, settings.LOGIN_TOKEN_EXPIRE_HOURS)
    return {"message": "User login successfully"}

@router.post("/logout", response_model=MessageResponse)
async def admin_logout(response: Response, current_admin: CurrentUser = Depends(require_role(Role.ADMIN))):
    clear_token_cookie(response)
    await user_service.touch_last_active(current_admin.id)
    return {"message": "Logout is successful!!"}

# ---- user lifecycle ----

@router.post("/register/users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserCreate, current_admin: CurrentUser = Depends(require_permission("user", "manage"))):
    """
    Register a user of any role (admin only).
    """
    created = await user_service.create_user(payload)
    logger.info(f"{current_admin.email_id} registered {created['role']} user {created['id']}")
    return {"message": "User Data added successfully!"}

@router.get("/users", response_model=UserPage)
async def list_users(
    role: Optional[Role] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=200),
    current_admin: CurrentUser = Depends(require_permission("user", "manage"))
):
    return await user_service.list_users(role=role, page=page, limit=limit)

@router.get("/users/{user_id}", response_model=UserOut)
async def get_user(user_id: str = Path(..., description="User ObjectId string"),
                   current_admin: CurrentUser = Depends(require_permission("user", "manage"))):
    return await user_service.get_user(user_id)

@router.patch("/users/deactivate/{user_id}", response_model=MessageResponse)
async def deactivate_user(user_id: str, current_admin: CurrentUser = Depends(require_permission("user", "manage"))):
    if user_id == current_admin.id:
        raise AuthorizationError("Admins cannot deactivate themselves")
    return await user_service.deactivate_user(user_id, current_admin.email_id)

@router.patch("/users/{user_id}", response_model=MessageResponse)
async def update_user(user_id: str, payload: UserUpdate, current_admin: CurrentUser = Depends(require_permission("user", "manage"))):
    """Only phoneNumber, firstName, lastName and status can be changed."""
    return await user_service.update_user(user_id, payload, current_admin.email_id)

# ---- delivery addresses on behalf of users ----

@router.post("/users/{user_id}/delivery-addresses", response_model=AddressEnvelope, status_code=status.HTTP_201_CREATED)
async def create_delivery_address(user_id: str, payload: DeliveryAddressIn,
                                  current_admin: CurrentUser = Depends(require_permission("address", "manage_any"))):
    address = await address_service.create_address(user_id, payload)
    return {"message": "Delivery address created successfully", "address": address}

@router.patch("/users/{user_id}/delivery-addresses/{address_id}", response_model=AddressEnvelope)
async def update_delivery_address(user_id: str, address_id: str, payload: DeliveryAddressIn,
                                  current_admin: CurrentUser = Depends(require_permission("address", "manage_any"))):
    address = await address_service.update_address(user_id, address_id, payload)
    return {"message": "Delivery address updated successfully", "address": address}

# ---- order oversight ----

@router.get("/orders", response_model=PaginatedOrderResponse)
async def list_orders(
    status: Optional[OrderStatus] = Query(None, description="Filter by order status"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Number of results per page"),
    current_admin: CurrentUser = Depends(require_permission("order", "oversee"))
):
    return await order_service.list_orders(status, start_date, end_date, page, limit)

@router.get("/orders/{order_id}", response_model=OrderOut)
async def get_order(order_id: str, current_admin: CurrentUser = Depends(require_permission("order", "oversee"))):
    return await order_service.get_order(order_id)

@router.post("/orders/{order_id}/cancel", response_model=OrderEnvelope)
async def cancel_order(order_id: str, current_admin: CurrentUser = Depends(require_permission("order", "cancel"))):
    order = await order_service.cancel_order(order_id, current_admin.email_id)
    return {"message": "Order cancelled successfully", "order": order}

@router.patch("/orders/{order_id}/reschedule", response_model=OrderEnvelope)
async def reschedule_order(order_id: str, payload: OrderReschedule,
                           current_admin: CurrentUser = Depends(require_permission("order", "reschedule"))):
    order = await order_service.reschedule_order(order_id, payload.new_date, current_admin.email_id)
    return {"message": "Order rescheduled successfully", "order": order}

# ---- reports ----

@router.get("/reports/popular-restaurants", response_model=List[PopularRestaurant])
async def popular_restaurants(limit: int = Query(5, ge=1, le=100),
                              current_admin: CurrentUser = Depends(require_permission("report", "read"))):
    return await report_service.popular_restaurants(limit)

@router.get("/reports/average-delivery-time", response_model=AverageDeliveryTime)
async def average_delivery_time(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_admin: CurrentUser = Depends(require_permission("report", "read"))
):
    return await report_service.average_delivery_time(start_date, end_date)

@router.get("/reports/order-trends", response_model=List[OrderTrendPoint])
async def order_trends(
    interval: Literal["day", "month"] = Query("day"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_admin: CurrentUser = Depends(require_permission("report", "read"))
):
    return await report_service.order_trends(interval, start_date, end_date)

# ---- monitoring ----

@router.get("/monitor/active-users", response_model=ActiveUserCount)
async def active_users(timeframe: int = Query(10, ge=1, description="Window in minutes"),
                       current_admin: CurrentUser = Depends(require_permission("monitor", "read"))):
    return await report_service.active_user_count(timeframe)

@router.get("/monitor/delivery-activity", response_model=DeliveryActivity)
async def delivery_activity(current_admin: CurrentUser = Depends(require_permission("monitor", "read"))):
    return await report_service.delivery_activity()

@router.get("/monitor/order-statuses", response_model=List[OrderStatusCount])
async def order_statuses(current_admin: CurrentUser = Depends(require_permission("monitor", "read"))):
    return await report_service.order_status_summary()
