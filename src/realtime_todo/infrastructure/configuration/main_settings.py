from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process configuration, read from the environment (and an optional .env)."""

    app_name: str = "Realtime Todo"
    env: str = Field(default="local", alias="APP_ENV")
    host: str = "0.0.0.0"
    port: int = Field(default=3001, description="Listening port")
    cors_allowed_origin: str = Field(
        default="http://localhost:3000", description="Origin of the browser client"
    )
    runtime_data_dir: Path = Path("./runtime_data")
    todo_db_file: str = "db.json"
    broadcast_send_timeout_seconds: float = Field(default=2.0, gt=0)
    log_level: str = "INFO"
    log_format: str = Field(default="auto", description="json, console, or auto (json in qa/staging/prod)")
    tracing_enabled: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def todo_db_path(self) -> Path:
        return self.runtime_data_dir / self.todo_db_file
