from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Configuration for the todo API client used by the board controller."""
    API_BASE_URL: str = "http://127.0.0.1:8000"
    PAGE_SIZE: int = 6
    TIMEOUT_SECONDS: float = 10.0

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_client_settings() -> ClientSettings:
    """Return a fresh client settings instance."""
    return ClientSettings()
