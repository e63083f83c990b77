from typing import Optional

from .mock_transport import MockTransport
from .models import Model
from .session import InferenceSession
from .settings import Settings, get_settings


async def create_session(
    max_length: int,
    model: Optional[Model] = None,
    settings: Optional[Settings] = None,
) -> InferenceSession:
    """
    Open an inference session as configured by the environment.

    Args:
        max_length: Maximum total length of the session, in tokens.
        model: The model to use. Defaults to PETALS_DEFAULT_MODEL.
        settings: Settings to use instead of the cached environment settings.

    Returns:
        An open session backed by a WebSocket in "remote" mode, or by a
        ``MockTransport`` in "mock" mode.
    """
    settings = settings or get_settings()
    if model is None:
        model = settings.PETALS_DEFAULT_MODEL

    if settings.PETALS_CLIENT_MODE == "mock":
        return await InferenceSession.start(MockTransport(), max_length, model)

    return await InferenceSession.open(
        settings.PETALS_API_ENDPOINT,
        max_length,
        model,
        connect_timeout=settings.PETALS_CONNECT_TIMEOUT,
    )
