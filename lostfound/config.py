import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 24 * 60  # 1 day

    database_url: str = "sqlite:///./lostfound.db"

    # Bootstrap admin credential, disabled unless both are set
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    frontend_url: str = "http://localhost:3000"
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def admin_bootstrap_enabled(self) -> bool:
        return bool(self.admin_email and self.admin_password)


@lru_cache
def get_settings() -> Settings:
    load_dotenv()

    secret_key = os.getenv("JWT_SECRET")

    if not secret_key:
        raise ValueError("Environment variable JWT_SECRET not set")

    admin_email = os.getenv("ADMIN_EMAIL")

    return Settings(
        jwt_secret=secret_key,
        jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", 24 * 60)),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./lostfound.db"),
        admin_email=admin_email.strip().lower() if admin_email else None,
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
        environment=os.getenv("ENVIRONMENT", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
