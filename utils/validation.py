import re
from datetime import datetime, timezone
from bson import ObjectId
from bson.errors import InvalidId
from core.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 8

ADDRESS_REQUIRED_FIELDS = ("first_name", "last_name", "address_line1", "city", "state", "country", "postal_code")

def validate_strong_password(password: str) -> str:
    """
    At least 8 characters with one lowercase, one uppercase, one digit and one symbol.
    """
    if (
        len(password) < MIN_PASSWORD_LENGTH
        or not re.search(r"[a-z]", password)
        or not re.search(r"[A-Z]", password)
        or not re.search(r"\d", password)
        or not re.search(r"[^A-Za-z0-9]", password)
    ):
        raise ValueError("Please enter a strong password")
    return password

def missing_fields(payload: dict, required=ADDRESS_REQUIRED_FIELDS) -> list:
    return [field for field in required if not payload.get(field)]

def to_object_id(value, label: str = "resource") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not value:
        # ObjectId(None) would mint a fresh id
        raise ValidationError(f"Invalid {label} id")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} id")

def naive_utc(value: datetime | None) -> datetime | None:
    """Stored datetimes are naive UTC; convert aware input so comparisons line up."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def created_between(start_date: datetime, end_date: datetime) -> dict:
    start, end = naive_utc(start_date), naive_utc(end_date)
    if start > end:
        raise ValidationError("startDate must be before endDate")
    return {"$gte": start, "$lte": end}
