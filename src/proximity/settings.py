from typing import Annotated
from typing import Optional

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import NoDecode


class Settings(BaseSettings):
    # === General ===
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    shutdown_grace_seconds: int = Field(default=5, validation_alias="SHUTDOWN_GRACE_SECONDS")

    # === Access ===
    api_key: Optional[str] = Field(default=None, validation_alias="PROXIMITY_API_KEY")
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["*"], validation_alias="CORS_ORIGINS"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # === Broadcasting ===
    stream_keepalive_seconds: float = Field(default=15.0, validation_alias="STREAM_KEEPALIVE_SECONDS")
    subscriber_queue_size: int = Field(default=100, validation_alias="SUBSCRIBER_QUEUE_SIZE")

    # === Proximity defaults ===
    max_range_meters: int = Field(default=5000, validation_alias="MAX_RANGE_METERS")
    ble_range_meters: int = Field(default=30, validation_alias="BLE_RANGE_METERS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
