import math
from datetime import datetime
from pymongo.errors import DuplicateKeyError
from db.db_operation import mongo_conn
from core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from models.user import Role, UserCreate, UserStatus, UserUpdate
from utils.hash import hash_password, verify_password
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import to_object_id
from utils.logger import get_logger

logger = get_logger("USER_SERVICE")

INVALID_CREDENTIALS = "Invalid credentials"

async def create_user(user: UserCreate, role: Role | None = None, extra: dict | None = None):
    """
    Persist a new user with a hashed password. `role` overrides the requested one.
    Returns the serialized user (without password).
    """
    logger.info(f"User create request received for email: {user.email_id}")
    users_collection = mongo_conn.users_collection
    if await users_collection.find_one({"email_id": user.email_id}):
        raise ConflictError("Email already registered")

    now = datetime.utcnow()
    user_dict = {
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email_id": user.email_id,
        "password": hash_password(user.password),
        "role": (role or user.role).value,
        "gender": user.gender,
        "phone_number": user.phone_number,
        "status": UserStatus.ACTIVE.value,
        "last_active_at": None,
        "created_at": now,
        "updated_at": now
    }
    if extra:
        user_dict.update(extra)
    try:
        result = await users_collection.insert_one(user_dict)
    except DuplicateKeyError:
        # unique index caught a concurrent signup
        raise ConflictError("Email already registered")
    user_dict["_id"] = result.inserted_id
    logger.info(f"User inserted into database with id: {result.inserted_id}")
    return serialize_doc(user_dict)

async def authenticate(email_id: str, password: str, allowed_roles=None):
    """
    Check credentials and account state. Unknown email and wrong password
    produce the same error so the caller cannot tell them apart.
    """
    users_collection = mongo_conn.users_collection
    db_user = await users_collection.find_one({"email_id": email_id})
    if not db_user or not verify_password(password, db_user["password"]):
        logger.warning(f"Login failed for {email_id}")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if allowed_roles is not None and Role(db_user["role"]) not in allowed_roles:
        logger.warning(f"Login refused for {email_id}: role {db_user['role']}")
        raise AuthorizationError("Invalid role")
    if db_user.get("status") != UserStatus.ACTIVE.value:
        logger.warning(f"Login refused for inactive account {email_id}")
        raise AuthorizationError("Account is not active")

    await touch_last_active(db_user["_id"])
    db_user["last_active_at"] = datetime.utcnow()
    logger.info(f"Login successful: {email_id}")
    return serialize_doc(db_user)

async def touch_last_active(user_id):
    await mongo_conn.users_collection.update_one(
        {"_id": to_object_id(user_id, "user")},
        {"$set": {"last_active_at": datetime.utcnow()}}
    )

async def get_user(user_id: str):
    user = await mongo_conn.users_collection.find_one({"_id": to_object_id(user_id, "user")}, {"password": 0})
    if not user:
        raise NotFoundError("User not found")
    return serialize_doc(user)

async def list_users(role: Role | None = None, page: int = 1, limit: int = 10):
    query = {}
    if role:
        query["role"] = role.value
    users_col = mongo_conn.users_collection
    cursor = users_col.find(query, {"password": 0}).sort("created_at", -1).skip((page - 1) * limit).limit(limit)
    users = await cursor.to_list(length=limit)
    total = await users_col.count_documents(query)
    return {
        "data": serialize_docs(users),
        "page": page,
        "total_pages": math.ceil(total / limit),
        "total_users": total
    }

async def deactivate_user(user_id: str, actor_email: str):
    result = await mongo_conn.users_collection.update_one(
        {"_id": to_object_id(user_id, "user")},
        {"$set": {"status": UserStatus.INACTIVE.value, "updated_at": datetime.utcnow()}}
    )
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info(f"{actor_email} deactivated user {user_id}")
    return {"message": "User deactivated"}

async def update_user(user_id: str, payload: UserUpdate, actor_email: str):
    update_doc = {k: v for k, v in payload.model_dump(exclude_none=True).items() if v != ""}
    if "status" in update_doc:
        update_doc["status"] = UserStatus(update_doc["status"]).value
    if not update_doc:
        raise ValidationError("No updatable fields supplied")
    update_doc["updated_at"] = datetime.utcnow()
    result = await mongo_conn.users_collection.update_one(
        {"_id": to_object_id(user_id, "user")},
        {"$set": update_doc}
    )
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info(f"{actor_email} updated user {user_id}: {sorted(update_doc)}")
    return {"message": "User details updated successfully"}

async def set_availability(user_id: str, is_available: bool):
    result = await mongo_conn.users_collection.update_one(
        {"_id": to_object_id(user_id, "user"), "role": Role.DELIVERY.value},
        {"$set": {"is_available": is_available, "updated_at": datetime.utcnow()}}
    )
    if result.matched_count == 0:
        raise NotFoundError("Delivery personnel not found")
    logger.info(f"Delivery personnel {user_id} availability set to {is_available}")
    return {"message": "Availability updated", "is_available": is_available}

async def list_delivery_personnel(only_available: bool | None = None):
    query = {"role": Role.DELIVERY.value}
    if only_available is not None:
        query["is_available"] = only_available
    cursor = mongo_conn.users_collection.find(query, {"password": 0}).sort("first_name", 1)
    return serialize_docs(await cursor.to_list(length=None))
