import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = ""

    # Where submitted requests land
    REQUEST_DATABASE_NAME: str = "vendor_management"
    REQUEST_COLLECTION_NAME: str = "requests"

    # Validate bodies against the RequestRecord schema before insert.
    # When false the raw JSON body is stored as-is.
    STRICT_REQUEST_VALIDATION: bool = True

    # Used by the form controller to reach the submission endpoint
    API_BASE_URL: str = "http://localhost:8030"
    SUBMIT_TIMEOUT_SECONDS: float = 10.0

    ALLOWED_ORIGINS: str = "*"
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(
        # Use absolute path to make sure .env is found
        env_file=os.path.join(os.path.dirname(__file__), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
