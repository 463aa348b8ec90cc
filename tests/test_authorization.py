import asyncio

import pytest
from bson import ObjectId

from core.authorization import (
    PERMISSIONS, STATUS_ACTIONS, ensure_restaurant_access, ensure_status_permission, is_allowed,
    require_permission, require_self_or_admin
)
from core.dependencies import CurrentUser
from core.exceptions import AuthorizationError
from models.order import OrderStatus
from models.user import Role


def principal(role, user_id=None):
    return CurrentUser(id=user_id or str(ObjectId()), email_id=f"{role.value}@example.com", role=role)


@pytest.mark.parametrize("role,resource,action,expected", [
    (Role.ADMIN, "user", "manage", True),
    (Role.CUSTOMER, "user", "manage", False),
    (Role.CUSTOMER, "order", "place", True),
    (Role.ADMIN, "order", "place", False),
    (Role.RESTAURANT, "order", "update_status", True),
    (Role.DELIVERY, "order", "update_status", False),
    (Role.DELIVERY, "order", "deliver", True),
    (Role.DELIVERY, "order", "place_on_behalf", True),
    (Role.CUSTOMER, "order", "place_on_behalf", False),
    (Role.DELIVERY, "restaurant", "browse", True),
    (Role.CUSTOMER, "menu", "manage", False),
    (Role.RESTAURANT, "report", "read", False),
    (Role.ADMIN, "delivery", "list_personnel", True),
])
def test_matrix(role, resource, action, expected):
    assert is_allowed(role, resource, action) is expected


def test_unknown_permission_is_denied():
    assert is_allowed(Role.ADMIN, "order", "teleport") is False


def test_require_permission_refuses_unknown_pairs():
    with pytest.raises(KeyError):
        require_permission("order", "teleport")


def test_matrix_only_names_known_roles():
    for roles in PERMISSIONS.values():
        assert roles <= frozenset(Role)


def test_permission_dependency():
    check = require_permission("report", "read")
    admin = principal(Role.ADMIN)
    assert asyncio.run(check(current_user=admin)) is admin
    with pytest.raises(AuthorizationError):
        asyncio.run(check(current_user=principal(Role.CUSTOMER)))


def test_self_or_admin():
    me = principal(Role.CUSTOMER)
    assert asyncio.run(require_self_or_admin(me.id, current_user=me)) is me
    admin = principal(Role.ADMIN)
    assert asyncio.run(require_self_or_admin(me.id, current_user=admin)) is admin
    with pytest.raises(AuthorizationError):
        asyncio.run(require_self_or_admin(str(ObjectId()), current_user=me))


def test_restaurant_access():
    owner = principal(Role.RESTAURANT)
    restaurant = {"_id": ObjectId(), "owner": ObjectId(owner.id)}

    ensure_restaurant_access(owner, restaurant)
    ensure_restaurant_access(principal(Role.ADMIN), restaurant)
    with pytest.raises(AuthorizationError):
        ensure_restaurant_access(principal(Role.RESTAURANT), restaurant)
    # a customer whose id happens to match is still not an owner
    with pytest.raises(AuthorizationError):
        ensure_restaurant_access(principal(Role.CUSTOMER, owner.id), restaurant)


@pytest.mark.parametrize("role", [Role.RESTAURANT, Role.DELIVERY, Role.CUSTOMER])
@pytest.mark.parametrize("target", [OrderStatus.CANCELLED, OrderStatus.RESCHEDULED])
def test_only_admins_cancel_or_reschedule(role, target):
    with pytest.raises(AuthorizationError):
        ensure_status_permission(principal(role), target)
    ensure_status_permission(principal(Role.ADMIN), target)


@pytest.mark.parametrize("target", ["preparing", "OutForDelivery", "Completed"])
def test_progress_statuses_have_no_extra_gate(target):
    assert OrderStatus(target) not in STATUS_ACTIONS
    ensure_status_permission(principal(Role.DELIVERY), target)
