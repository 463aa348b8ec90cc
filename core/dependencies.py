from fastapi import Depends
from fastapi.security import APIKeyCookie
from pydantic import BaseModel
from typing import Optional
from db.db_operation import mongo_conn
from core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from models.user import Role, UserStatus
from settings.config import settings
from utils.jwt_handler import decode_access_token
from utils.validation import to_object_id
from utils.logger import get_logger

logger = get_logger("Dependencies")

# tells fastapi to expect the token in a cookie set at login
cookie_scheme = APIKeyCookie(name=settings.TOKEN_COOKIE_NAME, auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
    status: UserStatus = UserStatus.ACTIVE

async def get_current_user(token: Optional[str] = Depends(cookie_scheme)) -> CurrentUser:
    """
    Decode the cookie token, fetch the user it names and make sure the account is still active.
    """
    if not token:
        logger.debug("No token cookie on request")
        raise AuthenticationError("Please login")
    payload = decode_access_token(token)
    user_id = payload["sub"]
    try:
        oid = to_object_id(user_id, "user")
    except ValidationError:
        raise AuthenticationError("Invalid token")

    user = await mongo_conn.users_collection.find_one({"_id": oid})
    if user is None:
        logger.warning(f"User not found for token subject: {user_id}")
        raise AuthenticationError("User not found")
    if user.get("status") == UserStatus.INACTIVE.value:
        logger.warning(f"Inactive user attempted access: {user.get('email_id')}")
        raise AuthorizationError("Account is inactive")

    return CurrentUser(
        id=str(user["_id"]),
        email_id=user["email_id"],
        first_name=user.get("first_name"),
        last_name=user.get("last_name"),
        role=user["role"],
        status=user.get("status", UserStatus.ACTIVE.value)
    )
