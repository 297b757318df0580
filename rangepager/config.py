"""Configuration management for the Range Pager API."""

from typing import List
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    app_name: str = "Range Pager API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["GET", "HEAD", "OPTIONS"]
    cors_allow_headers: List[str] = ["*"]

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Pagination settings
    default_sort_field: str = "id"
    accepted_sort_fields: List[str] = ["id"]
    default_first: int = 0
    default_page_size: int = 200
    max_page_size: int = 1000

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_sort_field")
    @classmethod
    def normalize_default_sort_field(cls, v):
        """Sort fields are matched case-insensitively."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Default sort field must not be empty")
        return v

    @field_validator("accepted_sort_fields")
    @classmethod
    def normalize_accepted_sort_fields(cls, v):
        """Lower-case and de-duplicate, keeping order for Accept-Ranges."""
        fields = []
        for field in v:
            field = field.strip().lower()
            if field and field not in fields:
                fields.append(field)
        if not fields:
            raise ValueError("At least one accepted sort field is required")
        return fields

    @field_validator("default_first")
    @classmethod
    def validate_default_first(cls, v):
        """Offsets start at zero."""
        if v < 0:
            raise ValueError("Default first offset must not be negative")
        return v

    @model_validator(mode="after")
    def validate_page_sizes(self):
        """Page size defaults must be positive and within the ceiling."""
        if self.default_page_size < 1:
            raise ValueError("Default page size must be at least 1")
        if self.max_page_size < self.default_page_size:
            raise ValueError("Max page size must not be below the default page size")
        return self

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
