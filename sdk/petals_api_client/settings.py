from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings

from .models import Model


class Settings(BaseSettings):
    """
    Client configuration loaded from environment variables.

    PETALS_CLIENT_MODE selects the transport used by ``create_session``:
    "remote" connects to PETALS_API_ENDPOINT, "mock" runs against an
    in-memory ``MockTransport``.
    """

    PETALS_API_ENDPOINT: str = "wss://chat.petals.dev/api/v2/generate"
    PETALS_CONNECT_TIMEOUT: float = 10.0
    PETALS_CLIENT_MODE: Literal["remote", "mock"] = "remote"
    PETALS_DEFAULT_MODEL: Optional[Model] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
