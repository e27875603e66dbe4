import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./relive.db")
    SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret-key")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 7))
    RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", 30))
    COOKIE_SECURE = os.getenv("COOKIE_SECURE", "True").lower() == "true"
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads/memory-media")
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "http://localhost:8000/api/v1/media")
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 50 * 1024 * 1024))
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "relive")

    STATS_CACHE_TTL = int(os.getenv("STATS_CACHE_TTL", "300"))

    LOG_FILE = os.getenv("LOG_FILE", "relive.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
