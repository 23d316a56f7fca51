# Complete settings for the notification producer
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import List


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class APISettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    access_log: bool = True


class RedpandaSettings(BaseModel):
    bootstrap_servers: str = "localhost:9092"
    client_id: str = "kafka-notify-client"
    topic: str = "notifications"
    # Upper bound on a single synchronous send; surfaced as a publish failure
    request_timeout_ms: int = 30000
    linger_ms: int = 0
    compression_type: str | None = None


class PartySettings(BaseModel):
    """A directory entry as it appears in configuration."""
    id: int
    name: str


def _default_directory() -> List[PartySettings]:
    return [
        PartySettings(id=1, name="Emma"),
        PartySettings(id=2, name="Bruno"),
        PartySettings(id=3, name="Rick"),
        PartySettings(id=4, name="Lena"),
    ]


class LoggingSettings(BaseModel):
    # Core logging settings
    level: str = "INFO"
    json_format: bool = True

    # Console logging
    console_enabled: bool = True
    console_json_format: bool = False  # Plain text for console by default

    # File logging
    file_enabled: bool = False
    logs_dir: str = "logs"
    file_max_size: str = "50MB"
    file_backup_count: int = 5

    # Redaction
    redact_keys: list[str] = [
        "authorization", "password", "secret", "token", "set-cookie", "sasl_plain_password"
    ]


class Settings(BaseSettings):
    """Main application settings, loaded from environment variables"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = "kafka-notify"
    version: str = "1.0.0"
    environment: Environment = Environment.DEVELOPMENT

    api: APISettings = APISettings()
    redpanda: RedpandaSettings = RedpandaSettings()
    logging: LoggingSettings = LoggingSettings()

    directory: List[PartySettings] = Field(
        default_factory=_default_directory,
        description="Known parties, loaded once at startup and never mutated"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def parse_environment(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def logs_dir(self) -> str:
        return self.logging.logs_dir
