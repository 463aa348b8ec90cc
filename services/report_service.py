# services/report_service.py
from datetime import datetime, timedelta
from db.db_operation import mongo_conn
from models.order import OrderStatus
from utils.serializers import serialize_doc, serialize_docs
from utils.validation import created_between
from utils.logger import get_logger

logger = get_logger("Report_Service")

TREND_FORMATS = {
    "day": "%Y-%m-%d",
    "month": "%Y-%m",
}

def _date_match(start_date: datetime | None, end_date: datetime | None) -> dict:
    # the range only applies when both ends are given
    if start_date and end_date:
        return {"created_at": created_between(start_date, end_date)}
    return {}

async def popular_restaurants(limit: int = 5):
    """
    Restaurants ranked by number of orders, joined with their details.
    """
    pipeline = [
        {"$group": {"_id": "$restaurant_id", "order_count": {"$sum": 1}}},
        {"$sort": {"order_count": -1}},
        {"$limit": limit},
        {
            "$lookup": {
                "from": mongo_conn.restaurants_collection.name,
                "localField": "_id",
                "foreignField": "_id",
                "as": "restaurant_info"
            }
        },
        {"$unwind": "$restaurant_info"},
        {"$project": {"restaurant_info": 1, "order_count": 1}}
    ]
    rows = await mongo_conn.orders_collection.aggregate(pipeline).to_list(length=None)
    return [
        {
            "restaurant_id": str(row["_id"]),
            "order_count": row["order_count"],
            "restaurant_info": serialize_doc(row["restaurant_info"])
        } for row in rows
    ]

async def average_delivery_time(start_date: datetime | None = None, end_date: datetime | None = None):
    """
    Mean of (order date - creation date) in minutes. Orders without a date are ignored.
    """
    match_stage = _date_match(start_date, end_date)
    match_stage["date"] = {"$ne": None}
    pipeline = [
        {"$match": match_stage},
        {
            "$group": {
                "_id": None,
                "average_time": {"$avg": {"$subtract": ["$date", "$created_at"]}}
            }
        }
    ]
    rows = await mongo_conn.orders_collection.aggregate(pipeline).to_list(length=None)
    if not rows or rows[0].get("average_time") is None:
        return {"average_delivery_time": 0}
    # $subtract on dates yields milliseconds
    minutes = rows[0]["average_time"] / 1000 / 60
    return {"average_delivery_time": round(minutes, 2)}

async def order_trends(interval: str = "day", start_date: datetime | None = None, end_date: datetime | None = None):
    group_format = TREND_FORMATS.get(interval, TREND_FORMATS["day"])
    pipeline = [
        {"$match": _date_match(start_date, end_date)},
        {
            "$group": {
                "_id": {"$dateToString": {"format": group_format, "date": "$created_at"}},
                "order_count": {"$sum": 1}
            }
        },
        {"$sort": {"_id": 1}}
    ]
    rows = await mongo_conn.orders_collection.aggregate(pipeline).to_list(length=None)
    return [{"period": row["_id"], "order_count": row["order_count"]} for row in rows]

async def active_user_count(timeframe_minutes: int = 10):
    active_since = datetime.utcnow() - timedelta(minutes=timeframe_minutes)
    count = await mongo_conn.users_collection.count_documents({"last_active_at": {"$gte": active_since}})
    logger.info(f"{count} users active in the last {timeframe_minutes} minutes")
    return {"active_user_count": count}

async def delivery_activity():
    cursor = mongo_conn.orders_collection.find({"order_status": OrderStatus.OUT_FOR_DELIVERY.value})
    deliveries = serialize_docs(await cursor.to_list(length=None))
    return {
        "active_delivery_count": len(deliveries),
        "active_deliveries": deliveries
    }

async def order_status_summary():
    pipeline = [
        {"$group": {"_id": "$order_status", "count": {"$sum": 1}}},
        {"$project": {"order_status": "$_id", "count": 1, "_id": 0}},
        {"$sort": {"count": -1}}
    ]
    return await mongo_conn.orders_collection.aggregate(pipeline).to_list(length=None)
