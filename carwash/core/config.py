import os
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # App
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "fallback-secret-key-for-development")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Admin account
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD_HASH: str = os.getenv("ADMIN_PASSWORD_HASH", "")
    AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "auth-token")

    # Cloudinary (payment proofs)
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")
    PAYMENT_PROOF_FOLDER: str = os.getenv("PAYMENT_PROOF_FOLDER", "bcw/payment-proofs")
    PAYMENT_PROOF_MAX_BYTES: int = int(os.getenv("PAYMENT_PROOF_MAX_BYTES", str(5 * 1024 * 1024)))

    # Bookings & loyalty
    BOOKING_TIMEZONE: str = os.getenv("BOOKING_TIMEZONE", "Asia/Jakarta")
    LOYALTY_EARN_RATE: int = int(os.getenv("LOYALTY_EARN_RATE", "10000"))
    LOYALTY_POINT_VALUE: int = int(os.getenv("LOYALTY_POINT_VALUE", "1000"))

    # URLs
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://localhost:8000")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    # Render
    RENDER_EXTERNAL_URL: str = os.getenv("RENDER_EXTERNAL_URL", "")
    RENDER: bool = os.getenv("RENDER", "False").lower() == "true"

    @property
    def IS_PRODUCTION(self):
        return self.RENDER or bool(self.RENDER_EXTERNAL_URL)

    @property
    def CURRENT_BASE_URL(self):
        if self.IS_PRODUCTION and self.RENDER_EXTERNAL_URL:
            return self.RENDER_EXTERNAL_URL.rstrip('/')
        return self.BACKEND_URL.rstrip('/')

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

settings = Settings()
