from datetime import datetime
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from db.db_operation import mongo_conn
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.address import DeliveryAddressIn
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import missing_fields, to_object_id
from utils.logger import get_logger

logger = get_logger("Address_Service")

async def _ensure_user(user_id: str):
    oid = to_object_id(user_id, "user")
    user = await mongo_conn.users_collection.find_one({"_id": oid}, {"_id": 1})
    if not user:
        raise NotFoundError("User not found")
    return oid

async def _clear_default(user_oid, keep_id=None):
    query = {"user_id": user_oid, "is_default": True}
    if keep_id is not None:
        query["_id"] = {"$ne": keep_id}
    result = await mongo_conn.delivery_addresses.update_many(query, {"$set": {"is_default": False}})
    if result.modified_count:
        logger.info(f"Cleared {result.modified_count} default address(es) for user {user_oid}")

async def create_address(user_id: str, payload: DeliveryAddressIn):
    """
    Create an address for a user. When it is flagged default, every other
    default of that user is cleared first; the partial unique index on
    (user_id, is_default=true) rejects a concurrent second default.
    """
    user_oid = await _ensure_user(user_id)
    data = payload.model_dump(exclude_none=True)
    missing = missing_fields(data)
    if missing:
        raise ValidationError(f"Missing required field: {missing[0]}")

    is_default = bool(data.pop("is_default", False))
    if is_default:
        await _clear_default(user_oid)

    now = datetime.utcnow()
    doc = {
        "user_id": user_oid,
        **data,
        "is_default": is_default,
        "created_at": now,
        "updated_at": now
    }
    try:
        result = await mongo_conn.delivery_addresses.insert_one(doc)
    except DuplicateKeyError:
        logger.warning(f"Concurrent default address detected for user {user_id}")
        raise ConflictError("Another default address was set concurrently, retry")
    doc["_id"] = result.inserted_id
    logger.info(f"Delivery address {result.inserted_id} created for user {user_id}")
    return serialize_doc(doc)

async def update_address(user_id: str, address_id: str, payload: DeliveryAddressIn):
    """
    Partial update. Empty strings are ignored so a mandatory field can never be blanked.
    """
    user_oid = await _ensure_user(user_id)
    address_oid = to_object_id(address_id, "address")
    existing = await mongo_conn.delivery_addresses.find_one({"_id": address_oid, "user_id": user_oid})
    if not existing:
        raise NotFoundError("Address not found")

    update_doc = {k: v for k, v in payload.model_dump(exclude_none=True).items() if v != ""}
    if update_doc.get("is_default"):
        await _clear_default(user_oid, keep_id=address_oid)
    update_doc["updated_at"] = datetime.utcnow()

    try:
        updated = await mongo_conn.delivery_addresses.find_one_and_update(
            {"_id": address_oid, "user_id": user_oid},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        logger.warning(f"Concurrent default address detected for user {user_id}")
        raise ConflictError("Another default address was set concurrently, retry")
    if not updated:
        raise NotFoundError("Address not found")
    logger.info(f"Delivery address {address_id} updated for user {user_id}")
    return serialize_doc(updated)

async def delete_address(user_id: str, address_id: str):
    deleted = await mongo_conn.delivery_addresses.find_one_and_delete({
        "_id": to_object_id(address_id, "address"),
        "user_id": to_object_id(user_id, "user")
    })
    if not deleted:
        raise NotFoundError("Address not found")
    logger.info(f"Delivery address {address_id} deleted for user {user_id}")
    return {"message": "Delivery address deleted successfully"}

async def list_addresses(user_id: str):
    cursor = mongo_conn.delivery_addresses.find({"user_id": to_object_id(user_id, "user")}).sort("created_at", 1)
    return serialize_docs(await cursor.to_list(length=None))
