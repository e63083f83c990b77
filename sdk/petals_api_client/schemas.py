"""
Wire messages exchanged with the Petals generate endpoint.

Every frame is a JSON object. Client requests carry a ``type`` field naming
the message kind; server responses have a fixed shape with no ``type``.
Unset optional fields are left out of encoded requests rather than sent as
``null``.
"""

from typing import Annotated, Literal, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    Field,
    FiniteFloat,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from .errors import ProtocolDecodeError
from .models import Model
from .params import GenerateParams

OPEN_INFERENCE_SESSION = "open_inference_session"
GENERATE = "generate"


class OpenSessionRequest(BaseModel):
    type: Literal["open_inference_session"] = OPEN_INFERENCE_SESSION
    max_length: NonNegativeInt
    model: Optional[Model] = None


class GenerateRequest(BaseModel):
    type: Literal["generate"] = GENERATE
    model: Optional[Model] = None
    max_length: Optional[NonNegativeInt] = None
    inputs: Optional[str] = None
    stop_sequence: Optional[str] = None
    do_sample: Optional[bool] = None
    temperature: Optional[FiniteFloat] = None
    top_k: Optional[NonNegativeInt] = None
    top_p: Optional[FiniteFloat] = None
    max_new_tokens: Optional[NonNegativeInt] = None

    @classmethod
    def from_params(cls, params: GenerateParams) -> "GenerateRequest":
        return cls(**params.model_dump(exclude_none=True))

    def to_params(self) -> GenerateParams:
        return GenerateParams(**self.model_dump(exclude={"type"}, exclude_none=True))


Request = Annotated[
    Union[OpenSessionRequest, GenerateRequest], Field(discriminator="type")
]

_request_adapter = TypeAdapter(Request)


class SessionAck(BaseModel):
    """Acknowledgment of an open_inference_session request."""

    ok: bool
    traceback: Optional[str] = None


class Response(BaseModel):
    """
    One streamed chunk of a generation.

    A successful frame carries ``outputs`` and ``stop``; a failed one has a
    falsy ``ok`` and usually a ``traceback``.
    """

    ok: bool
    outputs: str = ""
    stop: bool = False
    traceback: Optional[str] = None

    @model_validator(mode="after")
    def _check_success_fields(self) -> "Response":
        if self.ok and not {"outputs", "stop"} <= self.model_fields_set:
            raise ValueError("a successful response must carry outputs and stop")
        return self


def encode_message(request: Union[OpenSessionRequest, GenerateRequest]) -> str:
    """Serialize a request to the JSON text of one frame."""
    return request.model_dump_json(exclude_none=True)


def parse_request(text: str) -> Union[OpenSessionRequest, GenerateRequest]:
    """
    Decode a client request frame, selecting the message kind by its type field.

    Raises:
        ProtocolDecodeError: If the frame is not a known request.
    """
    try:
        return _request_adapter.validate_json(text)
    except ValidationError as e:
        raise ProtocolDecodeError(f"Malformed request frame: {e}") from e


M = TypeVar("M", bound=BaseModel)


def _decode(model_cls: Type[M], text: str) -> M:
    try:
        return model_cls.model_validate_json(text)
    except ValidationError as e:
        raise ProtocolDecodeError(
            f"Malformed {model_cls.__name__} frame: {e}"
        ) from e


def decode_ack(text: str) -> SessionAck:
    return _decode(SessionAck, text)


def decode_response(text: str) -> Response:
    return _decode(Response, text)
