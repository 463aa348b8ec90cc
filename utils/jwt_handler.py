from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from settings.config import settings
from core.exceptions import AuthenticationError
from utils.logger import get_logger

logger = get_logger("JWT_HANDLER")

def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Creates JWT token with expiry.
    `data` must carry the user id under `sub`.
    """
    logger.info("Access token creation requested")
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.LOGIN_TOKEN_EXPIRE_HOURS))
    to_encode.update({"exp": expire, "iat": now})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info(f"Access token created successfully with expiry {expire}")
    return encoded_jwt

def issue_token(user_id: str, role: str, hours: int) -> str:
    return create_access_token({"sub": str(user_id), "role": role}, timedelta(hours=hours))

def decode_access_token(token: str) -> dict:
    """
    Decode JWT token and return payload.
    Raises AuthenticationError if invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        logger.warning("JWT Error: Invalid token")
        raise AuthenticationError("Invalid token")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token: no subject found")
    return payload
