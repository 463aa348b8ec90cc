# services/restaurant_service.py
import re
from datetime import datetime
from pymongo import ReturnDocument
from db.db_operation import mongo_conn
from core.authorization import ensure_restaurant_access
from core.exceptions import NotFoundError, ValidationError
from models.restaurant import RestaurantCreate, RestaurantUpdate
from models.user import Role
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import to_object_id
from utils.logger import get_logger

logger = get_logger("Restaurant_Service")

async def create_restaurant(owner_id, payload: RestaurantCreate, actor_email: str = None):
    """
    Create a restaurant document owned by `owner_id`. One owner may have several restaurants.
    """
    now = datetime.utcnow()
    doc = {
        "owner": to_object_id(owner_id, "user"),
        "restaurant_name": payload.restaurant_name,
        "address": payload.address,
        "cuisine_type": payload.cuisine_type,
        "opening_hours": payload.opening_hours,
        "delivery_zone": payload.delivery_zone,
        "created_at": now,
        "updated_at": now
    }
    result = await mongo_conn.restaurants_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Restaurant created", extra={"actor": actor_email, "restaurant_id": str(result.inserted_id)})
    return serialize_doc(doc)

async def create_restaurant_for_user(user_id: str, payload: RestaurantCreate, actor_email: str = None):
    owner = await mongo_conn.users_collection.find_one({"_id": to_object_id(user_id, "user")})
    if not owner:
        raise NotFoundError("User not found")
    if owner.get("role") != Role.RESTAURANT.value:
        raise ValidationError("Restaurants can only be owned by restaurant accounts")
    return await create_restaurant(owner["_id"], payload, actor_email=actor_email)

async def get_restaurant_doc(restaurant_id) -> dict:
    doc = await mongo_conn.restaurants_collection.find_one({"_id": to_object_id(restaurant_id, "restaurant")})
    if not doc:
        raise NotFoundError("Restaurant not found")
    return doc

async def list_restaurants_by_owner(owner_id: str):
    cursor = mongo_conn.restaurants_collection.find({"owner": to_object_id(owner_id, "user")})
    return serialize_docs(await cursor.to_list(length=None))

async def list_restaurants(skip: int = 0, limit: int = 0):
    cursor = mongo_conn.restaurants_collection.find({}).sort("restaurant_name", 1).skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return serialize_docs(await cursor.to_list(length=None))

async def update_restaurant(restaurant_id: str, payload: RestaurantUpdate, current_user):
    restaurant = await get_restaurant_doc(restaurant_id)
    ensure_restaurant_access(current_user, restaurant)

    # allow-listed fields only, blanks ignored
    update_doc = {k: v for k, v in payload.model_dump(exclude_none=True).items() if v != ""}
    if not update_doc:
        raise ValidationError("No updatable fields supplied")
    update_doc["updated_at"] = datetime.utcnow()
    updated = await mongo_conn.restaurants_collection.find_one_and_update(
        {"_id": restaurant["_id"]},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER
    )
    if not updated:
        raise NotFoundError("Restaurant not found")
    logger.info(f"{current_user.email_id} updated restaurant {restaurant_id}")
    return serialize_doc(updated)

async def search_restaurants(query: str | None = None, cuisine: str | None = None):
    """
    Restaurants whose menu has an item matching `query` OR whose cuisine type
    matches `cuisine`. Both are case-insensitive substring matches.
    """
    conditions = []
    if query:
        pattern = {"$regex": re.escape(query), "$options": "i"}
        cursor = mongo_conn.menu_items.find({"item_name": pattern}, {"restaurant": 1})
        items = await cursor.to_list(length=None)
        restaurant_ids = list({item["restaurant"] for item in items})
        if restaurant_ids:
            conditions.append({"_id": {"$in": restaurant_ids}})
    if cuisine:
        conditions.append({"cuisine_type": {"$regex": re.escape(cuisine), "$options": "i"}})
    if not conditions:
        return []
    cursor = mongo_conn.restaurants_collection.find({"$or": conditions})
    results = serialize_docs(await cursor.to_list(length=None))
    logger.info(f"Restaurant search query={query!r} filter={cuisine!r} returned {len(results)}")
    return results
