import os
from pydantic_settings import BaseSettings
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """Configuration settings for the application."""
    PROJECT_NAME: str = "Food Delivery API"
    MONGO_URI: Optional[str] = os.getenv("MONGO_URI")
    DB_NAME: str = os.getenv("DB_NAME", "food_delivery")
    PORT: int = 8000

    # token signing
    SECRET_KEY: str = os.getenv("SECRET_KEY", "MySecretKey@123")
    ALGORITHM: str = "HS256"
    LOGIN_TOKEN_EXPIRE_HOURS: int = 8
    REGISTER_TOKEN_EXPIRE_HOURS: int = 24
    TOKEN_COOKIE_NAME: str = "token"

    BCRYPT_ROUNDS: int = 10
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
