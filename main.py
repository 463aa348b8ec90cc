from fastapi import FastAPI
from settings.config import settings
from db.db_operation import create_indexes, mongo_conn
from core.exceptions import register_exception_handlers
from utils.logger import get_logger
from routes import admin_routes, auth, customer_routes, delivery_routes, restaurant_routes

logger = get_logger("main")

app = FastAPI(
    title="Food Delivery API",
    description="Accounts, restaurants, menus, orders and delivery for a food-delivery platform.",
    version="1.0.0"
)

@app.get("/")
async def health_check():
    logger.info("Health check is successful")
    return {
        "status": "ok",
        "app": settings.PROJECT_NAME,
        "message": "FastAPI is running"
    }

@app.on_event("startup")
async def startup_event():
    await mongo_conn.connect()
    await create_indexes()

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api")
app.include_router(admin_routes.router, prefix="/api")
app.include_router(customer_routes.router, prefix="/api")
app.include_router(restaurant_routes.router, prefix="/api")
app.include_router(delivery_routes.router, prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
