# scripts/seed_admin.py
import asyncio
import os
from datetime import datetime
from db.db_operation import mongo_conn
from models.user import Role, UserStatus
from utils.hash import hash_password
from utils.logger import get_logger

logger = get_logger("Seed_Admin")

async def seed(email_id: str, password: str):
    """Create the first admin account; no route can create one without an admin."""
    users = mongo_conn.users_collection
    existing = await users.find_one({"email_id": email_id})
    if existing:
        logger.info(f"Admin already exists: {email_id}")
        return existing["_id"]
    now = datetime.utcnow()
    admin_doc = {
        "first_name": "Platform",
        "last_name": "Admin",
        "email_id": email_id,
        "password": hash_password(password),
        "role": Role.ADMIN.value,
        "status": UserStatus.ACTIVE.value,
        "last_active_at": None,
        "created_at": now,
        "updated_at": now
    }
    result = await users.insert_one(admin_doc)
    logger.info(f"Created admin: {email_id} {result.inserted_id}")
    return result.inserted_id

if __name__ == "__main__":
    asyncio.run(seed(
        os.getenv("ADMIN_EMAIL", "admin@platform.com"),
        os.getenv("ADMIN_PASSWORD", "Admin@1234")
    ))
