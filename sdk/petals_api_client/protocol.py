from typing import Protocol, runtime_checkable


@runtime_checkable
class InferenceTransportProtocol(Protocol):
    """
    Protocol for the duplex text-frame channel an inference session runs over.

    Implementations raise ``TransportError`` when the channel fails.
    """

    async def send_text(self, data: str) -> None:
        """
        Send one text frame.

        Args:
            data: The frame payload.
        """
        ...

    async def receive_text(self) -> str:
        """
        Wait for the next inbound text frame.

        Returns:
            The frame payload.
        """
        ...

    async def close(self) -> None:
        """Release the channel. Calling it more than once has no effect."""
        ...
