# core/authorization.py
from fastapi import Depends
from typing import Dict, FrozenSet, Tuple
from core.dependencies import get_current_user, CurrentUser
from core.exceptions import AuthorizationError
from models.order import OrderStatus
from models.user import Role
from utils.logger import get_logger

logger = get_logger("Authorization")

ALL_ROLES = frozenset(Role)

# (resource, action) -> roles allowed to perform it
PERMISSIONS: Dict[Tuple[str, str], FrozenSet[Role]] = {
    ("user", "manage"): frozenset({Role.ADMIN}),
    ("address", "manage_any"): frozenset({Role.ADMIN}),
    ("address", "manage_own"): frozenset({Role.CUSTOMER, Role.ADMIN}),
    ("order", "oversee"): frozenset({Role.ADMIN}),
    ("order", "cancel"): frozenset({Role.ADMIN}),
    ("order", "reschedule"): frozenset({Role.ADMIN}),
    ("order", "place"): frozenset({Role.CUSTOMER}),
    ("order", "track"): frozenset({Role.CUSTOMER}),
    ("order", "update_status"): frozenset({Role.RESTAURANT, Role.ADMIN}),
    ("order", "deliver"): frozenset({Role.DELIVERY}),
    ("order", "place_on_behalf"): frozenset({Role.DELIVERY, Role.ADMIN}),
    ("restaurant", "browse"): ALL_ROLES,
    ("restaurant", "manage"): frozenset({Role.RESTAURANT, Role.ADMIN}),
    ("menu", "manage"): frozenset({Role.RESTAURANT, Role.ADMIN}),
    ("report", "read"): frozenset({Role.ADMIN}),
    ("monitor", "read"): frozenset({Role.ADMIN}),
    ("delivery", "self"): frozenset({Role.DELIVERY}),
    ("delivery", "list_personnel"): frozenset({Role.ADMIN}),
}

# target statuses that are actions of their own, whatever route sets them
STATUS_ACTIONS: Dict[OrderStatus, Tuple[str, str]] = {
    OrderStatus.CANCELLED: ("order", "cancel"),
    OrderStatus.RESCHEDULED: ("order", "reschedule"),
}

def is_allowed(role, resource: str, action: str) -> bool:
    allowed = PERMISSIONS.get((resource, action))
    if allowed is None:
        # unknown pairs are denied
        return False
    return Role(role) in allowed

def ensure_status_permission(current_user: CurrentUser, target):
    action = STATUS_ACTIONS.get(OrderStatus(target))
    if action and not is_allowed(current_user.role, *action):
        logger.warning(f"Forbidden: {current_user.email_id} role {current_user.role.value} may not set status {OrderStatus(target).value}")
        raise AuthorizationError(f"Forbidden: role {current_user.role.value} may not set status {OrderStatus(target).value}")

def require_permission(resource: str, action: str):
    if (resource, action) not in PERMISSIONS:
        raise KeyError(f"No permission entry for {resource}.{action}")

    async def _dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not is_allowed(current_user.role, resource, action):
            logger.warning(f"Forbidden: {current_user.email_id} role {current_user.role.value} may not {resource}.{action}")
            raise AuthorizationError(f"Forbidden: role {current_user.role.value} may not {action} {resource}")
        return current_user
    return _dependency

def require_role(*allowed_roles):
    async def _dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed_roles:
            logger.warning(f"Forbidden: {current_user.email_id} role {current_user.role.value} not in allowed {allowed_roles}")
            raise AuthorizationError("Forbidden: insufficient role")
        return current_user
    return _dependency

async def require_self_or_admin(user_id: str, current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """
    For routes with a `{user_id}` path parameter: the caller must be that user or an admin.
    """
    if current_user.role != Role.ADMIN and current_user.id != user_id:
        logger.warning(f"Forbidden: {current_user.email_id} tried to act on behalf of user {user_id}")
        raise AuthorizationError("Not allowed to act on behalf of another user")
    return current_user

def ensure_restaurant_access(current_user: CurrentUser, restaurant: dict):
    """
    Admins may manage every restaurant, restaurant accounts only the ones they own.
    `restaurant` is a raw document.
    """
    if current_user.role == Role.ADMIN:
        return
    if current_user.role == Role.RESTAURANT and str(restaurant.get("owner")) == current_user.id:
        return
    logger.warning(f"Forbidden: {current_user.email_id} does not own restaurant {restaurant.get('_id')}")
    raise AuthorizationError("You are not allowed to manage this restaurant")
