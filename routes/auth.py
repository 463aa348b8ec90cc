from fastapi import APIRouter, Response
from core.exceptions import ValidationError
from core.security import clear_token_cookie, login_user
from models.admin import MessageResponse
from models.user import Role, UserCreate, UserEnvelope, UserLogin, UserOut
from services.user_service import authenticate, create_user
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("AUTH_ROUTE")

router = APIRouter(tags=["Auth"])

@router.post("/signup", response_model=UserEnvelope)
async def signup(user: UserCreate, response: Response):
    """Register a new user and log them in with a 24h cookie."""
    logger.info(f"Attempting to sign up user with email: {user.email_id}")
    if user.role == Role.ADMIN:
        # admins are created by another admin or the seed script
        raise ValidationError("Invalid role")
    user_created = await create_user(user)
    login_user(response, user_created, settings.REGISTER_TOKEN_EXPIRE_HOURS)
    logger.info(f"User created with email: {user.email_id}")
    return {"message": "User Added successfully!", "data": user_created}

@router.post("/login", response_model=UserOut)
async def login(credentials: UserLogin, response: Response):
    logger.info(f"Login attempt for: {credentials.email_id}")
    user = await authenticate(credentials.email_id, credentials.password)
    login_user(response, user, settings.LOGIN_TOKEN_EXPIRE_HOURS)
    return user

@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    clear_token_cookie(response)
    return {"message": "Logout is successful!!"}
