"""Application configuration"""
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./gatekeeper.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600  # Recycle connections after 1 hour
    DB_AUTO_CREATE: bool = True  # create_all on startup; disable when running Alembic

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Passwords
    BCRYPT_ROUNDS: int = 12

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # Use redis:// for production
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Monitoring
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    # JWT Authentication
    JWT_PRIVATE_KEY: Optional[str] = None   # RSA-2048 PEM string; auto-generated on startup if absent
    JWT_ALGORITHM: str = "RS256"
    JWT_EXPIRE_SECONDS: int = 86400         # 24 hours
    JWT_KEY_ID: Optional[str] = None        # kid claim for key rotation tracking

    # Seeding
    SEED_AUDIT_ENABLED: bool = False  # record bootstrap writes in the audit trail (system actor)

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
