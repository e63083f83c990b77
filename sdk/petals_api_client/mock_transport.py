import asyncio
import json
import os
import re
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence

from .errors import TransportError
from .schemas import GenerateRequest, OpenSessionRequest, parse_request

DEFAULT_TOKEN_DELAY = 0.01

DEFAULT_RESPONSES = [
    "Hello! How can I help you today?",
    "That's an interesting question. Could you tell me more about it?",
    "I understand. Is there anything else you'd like to know?",
    "Yes, I think you're absolutely right about that.",
    "I'm sorry, but could you be more specific about what you're looking for?",
]


class MockTransport:
    """
    An in-memory transport that plays the part of a Petals server.

    Every frame the client sends is recorded. Unless ``auto_reply`` is off,
    an open_inference_session request is acknowledged (or rejected with
    ``reject_with``) and each generate request is answered with the next
    canned response, streamed as token chunks with ``stop`` set on the last.
    """

    def __init__(
        self,
        responses: Optional[Sequence[str]] = None,
        token_delay: Optional[float] = None,
        reject_with: Optional[str] = None,
        auto_reply: bool = True,
    ):
        if token_delay is not None:
            self.token_delay = token_delay
        else:
            env_delay = os.getenv("MOCK_TOKEN_DELAY")
            self.token_delay = (
                float(env_delay) if env_delay is not None else DEFAULT_TOKEN_DELAY
            )

        if responses is not None:
            if not responses:
                raise ValueError("responses must be a non-empty list")
            if not all(isinstance(x, str) for x in responses):
                raise TypeError("all responses must be str")
            self.mock_responses = list(responses)
        else:
            self.mock_responses = DEFAULT_RESPONSES.copy()
        self.response_index = 0

        self.reject_with = reject_with
        self.auto_reply = auto_reply
        self.sent_frames: List[str] = []
        self.closed = False
        self._inbound: Deque[str] = deque()

    @property
    def sent_messages(self) -> List[Dict[str, Any]]:
        """The sent frames decoded as JSON objects."""
        return [json.loads(frame) for frame in self.sent_frames]

    def push(self, frame: Any) -> None:
        """
        Queue a frame for the client to receive.

        Args:
            frame: Raw frame text, or an object that is JSON-encoded first.
        """
        if not isinstance(frame, str):
            frame = json.dumps(frame)
        self._inbound.append(frame)

    def _tokenize_realistic(self, text: str) -> list[str]:
        """Split text into word and punctuation chunks, keeping the spacing."""
        result = []
        tokens = re.findall(r"\S+", text)

        for i, token in enumerate(tokens):
            prefix = " " if i > 0 else ""
            if re.search(r"[^\w\s]", token):
                parts_inner = re.findall(r"[\w'-]+|[^\w\s]", token)
                result.append(prefix + parts_inner[0])
                result.extend(parts_inner[1:])
            else:
                result.append(prefix + token)

        return result

    def _reply_to(self, frame: str) -> None:
        request = parse_request(frame)

        if isinstance(request, OpenSessionRequest):
            if self.reject_with is not None:
                self.push({"ok": False, "traceback": self.reject_with})
            else:
                self.push({"ok": True})
        elif isinstance(request, GenerateRequest):
            response_text = self.mock_responses[
                self.response_index % len(self.mock_responses)
            ]
            self.response_index += 1

            tokens = self._tokenize_realistic(response_text) or [""]
            for i, token in enumerate(tokens):
                self.push(
                    {"ok": True, "outputs": token, "stop": i == len(tokens) - 1}
                )

    async def send_text(self, data: str) -> None:
        if self.closed:
            raise TransportError("The mock connection is closed")
        self.sent_frames.append(data)
        if self.auto_reply:
            self._reply_to(data)

    async def receive_text(self) -> str:
        if self.closed:
            raise TransportError("The mock connection is closed")
        if not self._inbound:
            raise TransportError("The peer closed the connection")
        await asyncio.sleep(self.token_delay)
        return self._inbound.popleft()

    async def close(self) -> None:
        self.closed = True
