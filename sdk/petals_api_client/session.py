import logging
from typing import AsyncGenerator, Optional

from .errors import ApiError, TransportError
from .models import Model
from .params import GenerateParams
from .protocol import InferenceTransportProtocol
from .schemas import (
    GenerateRequest,
    OpenSessionRequest,
    Response,
    decode_ack,
    decode_response,
    encode_message,
)
from .transport import WebSocketTransport

logger = logging.getLogger(__name__)


class InferenceSession:
    """
    An open inference session with a Petals server.

    The session owns its transport. ``generate`` only sends a request; the
    caller reads the streamed chunks with ``receive`` or ``stream`` before
    sending the next one.

    Examples:
        >>> async with await InferenceSession.open(
        ...     "wss://chat.petals.dev/api/v2/generate",
        ...     max_length=512,
        ...     model=Model.STABLE_BELUGA_2,
        ... ) as session:
        ...     await session.generate(params)
        ...     async for response in session.stream():
        ...         print(response.outputs, end="")
    """

    def __init__(self, transport: InferenceTransportProtocol):
        self._transport = transport
        self._closed = False

    @classmethod
    async def open(
        cls,
        url: str,
        max_length: int,
        model: Optional[Model] = None,
        *,
        connect_timeout: Optional[float] = None,
    ) -> "InferenceSession":
        """
        Connect to ``url`` and open an inference session.

        Args:
            url: The WebSocket endpoint of the generate API.
            max_length: Maximum total length of the session, in tokens.
            model: The model to run the session against.
            connect_timeout: Seconds allowed for the connection to be established.

        Raises:
            TransportError: If connecting, sending or receiving fails.
            ApiError: If the server rejects the session.
            ProtocolDecodeError: If the acknowledgment is malformed.
        """
        transport = await WebSocketTransport.connect(url, timeout=connect_timeout)
        try:
            return await cls.start(transport, max_length, model)
        except BaseException:
            try:
                await transport.close()
            except TransportError:
                logger.exception("Failed to close the connection after a failed open")
            raise

    @classmethod
    async def start(
        cls,
        transport: InferenceTransportProtocol,
        max_length: int,
        model: Optional[Model] = None,
    ) -> "InferenceSession":
        """
        Perform the open handshake over an already connected transport.

        Sends one open_inference_session frame and reads exactly one frame
        back as the acknowledgment. On success the session takes ownership
        of the transport.
        """
        request = OpenSessionRequest(max_length=max_length, model=model)
        await _send(transport, encode_message(request))

        ack = decode_ack(await _receive(transport))
        if not ack.ok:
            raise ApiError(ack.traceback or "")

        logger.debug(
            f"Inference session opened (max_length={max_length}, model={model})"
        )
        return cls(transport)

    @property
    def transport(self) -> InferenceTransportProtocol:
        return self._transport

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportError("The inference session is closed")

    async def generate(self, params: GenerateParams) -> None:
        """
        Send one generate request.

        This returns as soon as the frame is sent. Read the output with
        ``receive`` or ``stream``.

        Raises:
            TransportError: If the frame cannot be sent.
        """
        self._ensure_open()
        request = GenerateRequest.from_params(params)
        await _send(self._transport, encode_message(request))

    async def receive(self) -> Response:
        """
        Read and decode the next response frame.

        Raises:
            TransportError: If the read fails.
            ProtocolDecodeError: If the frame is malformed.
        """
        self._ensure_open()
        return decode_response(await _receive(self._transport))

    async def stream(self) -> AsyncGenerator[Response, None]:
        """
        Yield response frames until one has ``stop`` set or reports an error.

        The terminating frame is yielded too. Frames after it are left unread.
        """
        while True:
            response = await self.receive()
            yield response
            if response.stop or not response.ok:
                return

    async def generate_text(self, params: GenerateParams) -> str:
        """
        Send a generate request and collect the streamed output into one string.

        Raises:
            ApiError: If the server reports an error mid-stream.
        """
        await self.generate(params)
        chunks = []
        async for response in self.stream():
            if not response.ok:
                raise ApiError(response.traceback or "")
            chunks.append(response.outputs)
        return "".join(chunks)

    async def close(self) -> None:
        """Release the transport. Further calls have no effect."""
        if self._closed:
            return
        self._closed = True
        await self._transport.close()

    async def __aenter__(self) -> "InferenceSession":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()


async def _send(transport: InferenceTransportProtocol, frame: str) -> None:
    logger.debug(f"-> {frame}")
    try:
        await transport.send_text(frame)
    except OSError as e:
        raise TransportError(f"Failed to send frame: {e}") from e


async def _receive(transport: InferenceTransportProtocol) -> str:
    try:
        frame = await transport.receive_text()
    except OSError as e:
        raise TransportError(f"Failed to receive frame: {e}") from e
    logger.debug(f"<- {frame}")
    return frame
