from .errors import ApiError, PetalsClientError, ProtocolDecodeError, TransportError
from .factory import create_session
from .mock_transport import MockTransport
from .models import Model
from .params import GenerateParams, GenerateParamsBuilder, has_length_bound
from .protocol import InferenceTransportProtocol
from .schemas import GenerateRequest, OpenSessionRequest, Response, SessionAck
from .session import InferenceSession
from .settings import Settings, get_settings
from .transport import WebSocketTransport

__all__ = [
    # session
    "InferenceSession",
    "create_session",
    # parameters
    "GenerateParams",
    "GenerateParamsBuilder",
    "Model",
    "has_length_bound",
    # wire messages
    "GenerateRequest",
    "OpenSessionRequest",
    "Response",
    "SessionAck",
    # transports
    "InferenceTransportProtocol",
    "MockTransport",
    "WebSocketTransport",
    # errors
    "ApiError",
    "PetalsClientError",
    "ProtocolDecodeError",
    "TransportError",
    # configuration
    "Settings",
    "get_settings",
]
