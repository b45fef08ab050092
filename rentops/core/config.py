"""
Configuration management using pydantic-settings.
Loads settings from environment variables and .env file.
"""
from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rentops.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Maintenance script settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Supabase Settings
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_service_role: Optional[str] = Field(default=None, description="Supabase service-role key")

    # Proof Storage Settings
    proofs_bucket: str = Field(default="proofs", description="Bucket holding payment proof files")
    proofs_folder: str = Field(default="proofs", description="Folder pruned inside the proofs bucket")
    payments_table: str = Field(default="payments", description="Table holding proof references")

    # Cleanup Settings
    cleanup_cutoff_date: date = Field(default=date(2025, 11, 1), description="Payments before this date lose their proofs")
    cleanup_batch_size: int = Field(default=50, description="Number of paths per remove call")

    # Prune Settings
    prune_cutoff: datetime = Field(
        default=datetime(2025, 11, 1, tzinfo=timezone.utc),
        description="Objects created before this instant are pruned"
    )
    prune_page_size: int = Field(default=100, description="Entries requested per listing page")

    # Cloudflare R2 (S3-compatible) Settings
    r2_endpoint: Optional[str] = Field(default=None, description="R2 S3 API endpoint")
    r2_access_key_id: Optional[str] = Field(default=None, description="R2 access key")
    r2_secret_access_key: Optional[str] = Field(default=None, description="R2 secret key")
    r2_bucket_name: Optional[str] = Field(default=None, description="R2 bucket name")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json or text)")

    @field_validator("cleanup_batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        """Validate batch size is positive."""
        if v <= 0:
            raise ValueError("CLEANUP_BATCH_SIZE must be positive")
        return v

    @field_validator("prune_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Validate listing page size is within what the storage API accepts."""
        if not 1 <= v <= 1000:
            raise ValueError("PRUNE_PAGE_SIZE must be between 1 and 1000")
        return v

    @field_validator("prune_cutoff")
    @classmethod
    def validate_prune_cutoff(cls, v: datetime) -> datetime:
        """Treat naive cutoffs as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is one of the supported renderers."""
        if v.lower() not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v.lower()

    def missing_supabase_credentials(self) -> List[str]:
        """Return the names of the Supabase variables that are not set."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role:
            missing.append("SUPABASE_SERVICE_ROLE")
        return missing

    def missing_r2_credentials(self) -> List[str]:
        """Return the names of the R2 variables that are not set."""
        required = {
            "R2_ENDPOINT": self.r2_endpoint,
            "R2_ACCESS_KEY_ID": self.r2_access_key_id,
            "R2_SECRET_ACCESS_KEY": self.r2_secret_access_key,
            "R2_BUCKET_NAME": self.r2_bucket_name,
        }
        return [name for name, value in required.items() if not value]


# Singleton settings instance, loaded on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the singleton settings instance.

    Returns:
        Settings instance loaded from environment

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            invalid = []
            reasons = []
            for error in e.errors():
                name = str(error["loc"][0]).upper() if error["loc"] else "SETTINGS"
                if name not in invalid:
                    invalid.append(name)
                    reasons.append(f"{name}: {error['msg']}")
            raise ConfigurationError(
                invalid,
                message="Invalid environment variables: " + "; ".join(reasons),
                original_exception=e,
            )
    return _settings
