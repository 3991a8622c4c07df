"""
Configuration settings for Mini LinkedIn API
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Mini LinkedIn API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False  # development mode, exposes error details

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    API_PREFIX: str = "/api"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "mini_linkedin"
    MONGODB_USERS_COLLECTION: str = "users"
    MONGODB_POSTS_COLLECTION: str = "posts"
    MONGODB_TIMEOUT_MS: int = 5000

    # JWT Settings
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Password Settings
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_HASH_SCHEMES: List[str] = ["pbkdf2_sha256"]

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Feed Settings
    TRENDING_WINDOW_HOURS: int = 24
    TRENDING_LIMIT: int = 10
    SUGGESTED_WINDOW_DAYS: int = 7
    SUGGESTED_DEFAULT_LIMIT: int = 5
    SUGGESTED_MAX_LIMIT: int = 50
    PROFILE_RECENT_POSTS: int = 5
    USER_STATS_RECENT_DAYS: int = 30

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
