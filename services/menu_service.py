from datetime import datetime
from pymongo import ReturnDocument
from db.db_operation import mongo_conn
from core.authorization import ensure_restaurant_access
from core.exceptions import NotFoundError, ValidationError
from models.menu import MenuItemCreate, MenuItemUpdate
from services.restaurant_service import get_restaurant_doc
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import to_object_id
from utils.logger import get_logger

logger = get_logger("Menu_Service")

async def create_menu_item(payload: MenuItemCreate, current_user):
    """
    Create a menu item for the restaurant named in the payload.
    """
    restaurant = await get_restaurant_doc(payload.restaurant)
    ensure_restaurant_access(current_user, restaurant)

    now = datetime.utcnow()
    doc = {
        "restaurant": restaurant["_id"],
        "item_name": payload.item_name,
        "description": payload.description,
        "price": float(payload.price),
        "availability": bool(payload.availability),
        "created_at": now,
        "updated_at": now
    }
    result = await mongo_conn.menu_items.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Menu item created", extra={"restaurant_id": str(restaurant["_id"]), "actor": current_user.email_id, "item_id": str(result.inserted_id)})
    return serialize_doc(doc)

async def list_menu_items(restaurant_id: str, current_user, only_available: bool = False):
    restaurant = await get_restaurant_doc(restaurant_id)
    ensure_restaurant_access(current_user, restaurant)
    q = {"restaurant": restaurant["_id"]}
    if only_available:
        q["availability"] = True
    cursor = mongo_conn.menu_items.find(q).sort("item_name", 1)
    return serialize_docs(await cursor.to_list(length=None))

async def _get_item_and_check(item_id: str, current_user):
    item = await mongo_conn.menu_items.find_one({"_id": to_object_id(item_id, "menu item")})
    if not item:
        raise NotFoundError("Menu item not found")
    restaurant = await get_restaurant_doc(item["restaurant"])
    ensure_restaurant_access(current_user, restaurant)
    return item

async def update_menu_item(item_id: str, payload: MenuItemUpdate, current_user):
    item = await _get_item_and_check(item_id, current_user)
    # exclude_none keeps availability=False
    update_doc = {k: v for k, v in payload.model_dump(exclude_none=True).items() if v != ""}
    if not update_doc:
        raise ValidationError("No updatable fields supplied")
    update_doc["updated_at"] = datetime.utcnow()
    updated = await mongo_conn.menu_items.find_one_and_update(
        {"_id": item["_id"]},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER
    )
    logger.info(f"{current_user.email_id} updated menu item {item_id}")
    return serialize_doc(updated)

async def delete_menu_item(item_id: str, current_user):
    item = await _get_item_and_check(item_id, current_user)
    result = await mongo_conn.menu_items.delete_one({"_id": item["_id"]})
    if result.deleted_count == 0:
        raise NotFoundError("Menu item not found")
    logger.info(f"{current_user.email_id} deleted menu item {item_id}")
    return {"message": "Menu Item Deleted Successfully"}
