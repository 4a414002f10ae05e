"""
DocStore API — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Credential resolution order (see app.firebase):
    1. FIREBASE_SERVICE_ACCOUNT_PATH points at an existing file
    2. FIREBASE_SERVICE_ACCOUNT_KEY holds the service-account JSON
    3. Application Default Credentials
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development against
    a service-account file in the working directory.
    """

    # ── Firebase / Firestore ──────────────────────────────────────────────
    # What: Service-account key file, relative to the process working directory
    firebase_service_account_path: str = Field(
        default="firebase-service-account.json",
        description="Path to a Firebase service-account JSON file",
    )

    # What: The same service-account JSON, inlined (for containers and CI)
    firebase_service_account_key: str = Field(
        default="",
        description="Firebase service-account JSON passed as a string",
    )

    # What: Overrides the project inferred from the credential
    firebase_project_id: Optional[str] = Field(default=None)

    # What: Named Firestore database; None selects "(default)"
    firestore_database_id: Optional[str] = Field(default=None)

    # What: Collection served under /users
    users_collection: str = Field(default="users", min_length=1)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # FIREBASE_PROJECT_ID and firebase_project_id both work
    }


# Singleton instance — imported throughout the application
settings = Settings()
