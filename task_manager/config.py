from pydantic_settings import BaseSettings
from typing import Optional
from pydantic import Field

class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60)
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)

    DATABASE_URL: str
    SQLALCHEMY_DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False

    # Label name/email pair that may not be changed by that user. Empty → disabled.
    LEGACY_LABEL_GUARD_EMAIL: str = "testuser@example.com"
    LEGACY_LABEL_GUARD_NAME: str = "Another User's Label"

    SEED_DEFAULT_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        db_url = self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL
        # Ensure asyncpg is used
        if db_url.startswith("postgresql://"):
            db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return db_url

    @property
    def legacy_label_guard_enabled(self) -> bool:
        return bool(self.LEGACY_LABEL_GUARD_EMAIL and self.LEGACY_LABEL_GUARD_NAME)

settings = Settings()
