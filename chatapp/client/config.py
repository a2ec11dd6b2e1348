from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Chat client configuration, read from CHAT_CLIENT_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="CHAT_CLIENT_", env_file=".env", case_sensitive=True, extra="ignore")

    API_BASE_URL: str = "http://localhost:5002/api"
    SOCKET_URL: str = "ws://localhost:5002/api/ws"
    REQUEST_TIMEOUT: float = 10.0

    # What happens to the user's own message when the bot request fails:
    # keep, mark_failed, rollback
    BOT_FAILURE_POLICY: str = "keep"


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
