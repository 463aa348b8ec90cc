import math
from datetime import datetime
from pymongo import ReturnDocument
from db.db_operation import mongo_conn
from core.authorization import ensure_restaurant_access, ensure_status_permission
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.order import OrderCreate, OrderStatus, ensure_transition
from models.user import Role, UserStatus
from services.restaurant_service import get_restaurant_doc
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import created_between, naive_utc, to_object_id
from utils.logger import get_logger

logger = get_logger("Order_Service")

async def create_order(user_id: str, order: OrderCreate):
    """
    Place an order for `user_id` with status "preparing".

    Items and prices are stored as sent by the client; they are not
    re-priced against the menu and availability is not checked.
    """
    restaurant = await get_restaurant_doc(order.restaurant_id)
    user_oid = to_object_id(user_id, "user")

    address_oid = None
    if order.delivery_address_id:
        address_oid = to_object_id(order.delivery_address_id, "address")
        address = await mongo_conn.delivery_addresses.find_one({"_id": address_oid, "user_id": user_oid})
        if not address:
            raise NotFoundError("Delivery address not found")

    now = datetime.utcnow()
    order_doc = {
        "user_id": user_oid,
        "restaurant_id": restaurant["_id"],
        "items": [item.model_dump(exclude_none=True) for item in order.items],
        "delivery_address_id": address_oid,
        "delivery_person_id": None,
        "order_status": OrderStatus.PREPARING.value,
        "date": naive_utc(order.date),
        "created_at": now,
        "updated_at": None
    }
    result = await mongo_conn.orders_collection.insert_one(order_doc)
    order_doc["_id"] = result.inserted_id
    logger.info("Order created", extra={"order_id": str(result.inserted_id), "user": user_id, "restaurant_id": order.restaurant_id})
    return serialize_doc(order_doc)

async def create_order_on_behalf(customer_id: str, order: OrderCreate, actor_email: str):
    customer = await mongo_conn.users_collection.find_one({"_id": to_object_id(customer_id, "user")})
    if not customer or customer.get("role") != Role.CUSTOMER.value:
        raise NotFoundError("Customer not found")
    if customer.get("status") != UserStatus.ACTIVE.value:
        raise ValidationError("Customer account is not active")
    created = await create_order(customer_id, order)
    logger.info(f"{actor_email} placed order {created['id']} on behalf of {customer_id}")
    return created

async def get_order_doc(order_id: str) -> dict:
    order = await mongo_conn.orders_collection.find_one({"_id": to_object_id(order_id, "order")})
    if not order:
        raise NotFoundError("Order not found")
    return order

async def get_order(order_id: str):
    return serialize_doc(await get_order_doc(order_id))

async def track_order(user_id: str, order_id: str):
    """
    Status of an order owned by `user_id`. Someone else's order is reported
    as not found so its existence is not revealed.
    """
    order = await mongo_conn.orders_collection.find_one({
        "_id": to_object_id(order_id, "order"),
        "user_id": to_object_id(user_id, "user")
    })
    if not order:
        raise NotFoundError("Order not found")
    return {"status": order["order_status"]}

async def order_history(user_id: str):
    cursor = mongo_conn.orders_collection.find({"user_id": to_object_id(user_id, "user")}).sort("created_at", -1)
    orders = await cursor.to_list(length=None)
    logger.info(f"Fetched {len(orders)} orders for user {user_id}")
    return serialize_docs(orders)

async def list_orders(status: OrderStatus | None = None, start_date: datetime | None = None,
                      end_date: datetime | None = None, page: int = 1, limit: int = 10):
    """Fetch paginated orders with optional status and created-at range filters"""
    query = {}
    if status:
        query["order_status"] = OrderStatus(status).value
    if start_date and end_date:
        query["created_at"] = created_between(start_date, end_date)

    orders_collection = mongo_conn.orders_collection
    cursor = orders_collection.find(query).sort("created_at", -1).skip((page - 1) * limit).limit(limit)
    orders = await cursor.to_list(length=limit)
    total_count = await orders_collection.count_documents(query)
    return {
        "data": serialize_docs(orders),
        "page": page,
        "total_pages": math.ceil(total_count / limit),
        "total_orders": total_count
    }

async def change_status(order: dict, target: OrderStatus, extra: dict | None = None):
    """
    Move `order` to `target` after checking the transition table. The update
    is conditional on the status read, so a concurrent change is reported
    instead of being overwritten.
    """
    current = order.get("order_status")
    target = ensure_transition(current, target)
    update_doc = {"order_status": target.value, "updated_at": datetime.utcnow()}
    if extra:
        update_doc.update(extra)
    updated = await mongo_conn.orders_collection.find_one_and_update(
        {"_id": order["_id"], "order_status": current},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER
    )
    if not updated:
        raise ConflictError("Order was modified concurrently, retry")
    logger.info("Order status updated", extra={"order_id": str(order["_id"]), "from": current, "to": target.value})
    return serialize_doc(updated)

async def cancel_order(order_id: str, actor_email: str):
    order = await get_order_doc(order_id)
    if order.get("order_status") == OrderStatus.CANCELLED.value:
        logger.info(f"Order {order_id} already cancelled")
        return serialize_doc(order)
    cancelled = await change_status(order, OrderStatus.CANCELLED)
    logger.info(f"Order {order_id} cancelled by {actor_email}")
    return cancelled

async def reschedule_order(order_id: str, new_date: datetime, actor_email: str):
    order = await get_order_doc(order_id)
    rescheduled = await change_status(order, OrderStatus.RESCHEDULED, {"date": naive_utc(new_date)})
    logger.info(f"Order {order_id} rescheduled to {new_date} by {actor_email}")
    return rescheduled

async def _apply_status_update(order: dict, new_status: OrderStatus, current_user):
    """
    Status change requested through a generic status route. Cancelling and
    rescheduling keep their own permissions, and a reschedule always carries
    a new date so it only goes through `reschedule_order`.
    """
    ensure_status_permission(current_user, new_status)
    if OrderStatus(new_status) == OrderStatus.RESCHEDULED:
        raise ValidationError("Use the reschedule endpoint to set a new date")
    return await change_status(order, new_status)

async def list_restaurant_orders(restaurant_id: str, status: OrderStatus, current_user):
    restaurant = await get_restaurant_doc(restaurant_id)
    ensure_restaurant_access(current_user, restaurant)
    cursor = mongo_conn.orders_collection.find({
        "restaurant_id": restaurant["_id"],
        "order_status": OrderStatus(status).value
    }).sort("created_at", -1)
    return serialize_docs(await cursor.to_list(length=None))

async def update_status_by_restaurant(order_id: str, new_status: OrderStatus, current_user):
    order = await get_order_doc(order_id)
    restaurant = await get_restaurant_doc(order["restaurant_id"])
    ensure_restaurant_access(current_user, restaurant)
    return await _apply_status_update(order, new_status, current_user)

async def list_available_orders():
    """Orders still being prepared that no delivery person has taken."""
    cursor = mongo_conn.orders_collection.find({
        "order_status": OrderStatus.PREPARING.value,
        "delivery_person_id": None
    }).sort("created_at", 1)
    return serialize_docs(await cursor.to_list(length=None))

async def accept_order(order_id: str, delivery_person_id: str):
    person_oid = to_object_id(delivery_person_id, "user")
    person = await mongo_conn.users_collection.find_one({"_id": person_oid})
    if not person or not person.get("is_available", False):
        raise ValidationError("You must be available to accept orders")

    order = await get_order_doc(order_id)
    ensure_transition(order.get("order_status"), OrderStatus.OUT_FOR_DELIVERY)
    # conditional update: only one delivery person can take the order
    updated = await mongo_conn.orders_collection.find_one_and_update(
        {"_id": order["_id"], "delivery_person_id": None, "order_status": order["order_status"]},
        {"$set": {
            "delivery_person_id": person_oid,
            "order_status": OrderStatus.OUT_FOR_DELIVERY.value,
            "updated_at": datetime.utcnow()
        }},
        return_document=ReturnDocument.AFTER
    )
    if not updated:
        raise ConflictError("Order has already been accepted")
    logger.info(f"Order {order_id} accepted by delivery personnel {delivery_person_id}")
    return serialize_doc(updated)

async def update_delivery_status(order_id: str, new_status: OrderStatus, current_user):
    order = await get_order_doc(order_id)
    if str(order.get("delivery_person_id")) != current_user.id:
        # not assigned to the caller
        raise NotFoundError("Order not found")
    return await _apply_status_update(order, new_status, current_user)
