class PetalsClientError(Exception):
    """Base class for all errors raised by the client."""


class TransportError(PetalsClientError):
    """
    The underlying channel failed to connect, send or receive a frame.

    The original exception is chained as ``__cause__``.
    """


class ApiError(PetalsClientError):
    """
    The remote endpoint rejected a request.

    Args:
        traceback: The diagnostic string returned by the server.
    """

    def __init__(self, traceback: str):
        super().__init__(traceback)
        self.traceback = traceback


class ProtocolDecodeError(PetalsClientError):
    """An inbound frame was not valid JSON or lacked required fields."""
