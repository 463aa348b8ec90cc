from fastapi import Response
from settings.config import settings
from utils.jwt_handler import issue_token
from utils.logger import get_logger

logger = get_logger("Security_Utils")

def set_token_cookie(response: Response, token: str, hours: int):
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=hours * 3600,
        httponly=True,
        samesite="lax"
    )

def clear_token_cookie(response: Response):
    # overwrite with an already expired value
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value="",
        max_age=0,
        expires=0,
        httponly=True,
        samesite="lax"
    )

def login_user(response: Response, user: dict, hours: int = settings.LOGIN_TOKEN_EXPIRE_HOURS) -> str:
    """Issue a token for the serialized user and attach it as the auth cookie."""
    token = issue_token(user["id"], user["role"], hours)
    set_token_cookie(response, token, hours)
    logger.info(f"Token cookie issued for user {user['id']} ({hours}h)")
    return token
