# app/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra='ignore')

    # Application Settings
    APP_NAME: str = "Phone OTP Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Credential store: "firestore" in production, "memory" for local runs and tests
    STORE_BACKEND: str = "firestore"

    # Firebase Settings
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""

    # Firestore layout
    USERS_COLLECTION: str = "users"
    PENDING_VERIFICATIONS_COLLECTION: str = "pendingVerifications"
    METADATA_COLLECTION: str = "metadata"
    USER_COUNTER_DOCUMENT: str = "userCounter"
    FIRESTORE_TRANSACTION_MAX_ATTEMPTS: int = 5

    # OTP Settings
    OTP_EXPIRY_SECONDS: int = 600

    # CORS Settings
    ALLOWED_ORIGINS: str = "*"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Helper methods for list envs
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def firebase_private_key(self) -> str:
        # Keys pasted into env vars usually carry literal "\n" sequences
        return self.FIREBASE_PRIVATE_KEY.replace('\\n', '\n')

    @property
    def firebase_configured(self) -> bool:
        return bool(self.FIREBASE_PROJECT_ID and self.FIREBASE_CLIENT_EMAIL and self.FIREBASE_PRIVATE_KEY)

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
