import sys
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("DB_OPERATION")

async def create_indexes():
    await mongo_conn.users_collection.create_index("email_id", unique=True)
    await mongo_conn.users_collection.create_index("last_active_at")
    await mongo_conn.restaurants_collection.create_index("owner")
    await mongo_conn.menu_items.create_index("restaurant")
    orders_collection = mongo_conn.orders_collection
    await orders_collection.create_index("user_id")
    await orders_collection.create_index("restaurant_id")
    await orders_collection.create_index("order_status")
    await orders_collection.create_index("created_at")
    # at most one default address per user
    await mongo_conn.delivery_addresses.create_index(
        [("user_id", ASCENDING)],
        unique=True,
        partialFilterExpression={"is_default": True},
        name="one_default_address_per_user"
    )
    logger.info("Indexes created")

class MongoConnection:
    def __init__(self):
        logger.info("Initializing MongoDB Connection")
        mongo_uri = settings.MONGO_URI
        if not mongo_uri:
            logger.critical("MONGO_URI is not defined, exiting")
            sys.exit(1)
        client = AsyncIOMotorClient(mongo_uri)
        self.bind(client, client[settings.DB_NAME])

    def bind(self, client, db):
        """Point every collection handle at the given client/database."""
        self.client = client
        self.db = db
        self.users_collection = self.db["users"]
        self.restaurants_collection = self.db["restaurants"]
        self.menu_items = self.db["menu_items"]
        self.orders_collection = self.db["orders"]
        self.delivery_addresses = self.db["delivery_addresses"]

    async def connect(self):
        try:
            # Force an actual connection & authentication check
            await self.db.command("ping")
            logger.info("Successfully connected to MongoDB and authenticated.")
            logger.info(f"Using Database: {self.db.name}")
            logger.info(f"Collections ready: {self.users_collection.name}, {self.restaurants_collection.name}, {self.orders_collection.name}")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise e

# Create the instance
mongo_conn = MongoConnection()
