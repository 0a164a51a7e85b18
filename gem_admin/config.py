import os
from functools import lru_cache

# Prefer loading environment variables from a .env file if python-dotenv is available
try:
    from dotenv import load_dotenv, find_dotenv
    _env_path = find_dotenv(usecwd=True)
    if _env_path:
        load_dotenv(_env_path, override=False)
except ImportError:
    pass


class Settings:
    def __init__(self):
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_secret")
        self.ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
        # Default to 7 days so admins stay signed in for a week
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
        # Local store for dashboard settings and revoked sessions only
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./gem_admin.db")
        # Remote REST API that owns products, orders, bookings and media
        self.API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:5000/api")
        self.API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "10"))
        self.ORDERS_FETCH_LIMIT: int = int(os.getenv("ORDERS_FETCH_LIMIT", "100000"))
        self.LOGIN_ROUTE: str = os.getenv("LOGIN_ROUTE", "/login")
        # Initial page loads retry this many extra times on 5xx/network errors
        self.LOAD_RETRY_ATTEMPTS: int = int(os.getenv("LOAD_RETRY_ATTEMPTS", "2"))
        self.LOAD_RETRY_DELAY_SECONDS: float = float(os.getenv("LOAD_RETRY_DELAY_SECONDS", "2.0"))
        self.MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
        # Comma separated list; "*" allows any origin
        self.CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def cors_origins(self):
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings():
    return Settings()
