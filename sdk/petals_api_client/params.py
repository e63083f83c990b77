from typing import Any, Dict, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    FiniteFloat,
    NonNegativeInt,
    model_validator,
)

from .models import Model


def has_length_bound(
    max_length: Optional[int], max_new_tokens: Optional[int]
) -> bool:
    """Return True if at least one of the two generation length limits is set."""
    return max_length is not None or max_new_tokens is not None


class GenerateParams(BaseModel):
    """
    An immutable set of parameters for a single generate request.

    At least one of ``max_length`` or ``max_new_tokens`` must be set. Use
    ``GenerateParamsBuilder`` to get ``None`` instead of a validation error
    when neither is given.
    """

    model_config = ConfigDict(frozen=True)

    model: Optional[Model] = None
    inputs: Optional[str] = None
    do_sample: Optional[bool] = None
    temperature: Optional[FiniteFloat] = None
    top_k: Optional[NonNegativeInt] = None
    top_p: Optional[FiniteFloat] = None
    max_length: Optional[NonNegativeInt] = None
    max_new_tokens: Optional[NonNegativeInt] = None
    stop_sequence: Optional[str] = None

    @model_validator(mode="after")
    def _check_length_bound(self) -> "GenerateParams":
        if not has_length_bound(self.max_length, self.max_new_tokens):
            raise ValueError("either max_length or max_new_tokens must be set")
        return self


class GenerateParamsBuilder:
    """
    Fluent accumulator for ``GenerateParams``.

    Every setter returns the builder itself, and setting a field twice keeps
    the last value.

    Examples:
        >>> params = (
        ...     GenerateParamsBuilder()
        ...     .model(Model.STABLE_BELUGA_2)
        ...     .inputs("A cat sat on")
        ...     .max_new_tokens(8)
        ...     .build()
        ... )
    """

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> "GenerateParamsBuilder":
        self._fields[name] = value
        return self

    def model(self, model: Model) -> "GenerateParamsBuilder":
        return self._set("model", model)

    def inputs(self, inputs: str) -> "GenerateParamsBuilder":
        return self._set("inputs", inputs)

    def do_sample(self, do_sample: bool) -> "GenerateParamsBuilder":
        return self._set("do_sample", do_sample)

    def temperature(self, temperature: float) -> "GenerateParamsBuilder":
        return self._set("temperature", temperature)

    def top_k(self, top_k: int) -> "GenerateParamsBuilder":
        return self._set("top_k", top_k)

    def top_p(self, top_p: float) -> "GenerateParamsBuilder":
        return self._set("top_p", top_p)

    def max_length(self, max_length: int) -> "GenerateParamsBuilder":
        return self._set("max_length", max_length)

    def max_new_tokens(self, max_new_tokens: int) -> "GenerateParamsBuilder":
        return self._set("max_new_tokens", max_new_tokens)

    def stop_sequence(self, stop_sequence: str) -> "GenerateParamsBuilder":
        return self._set("stop_sequence", stop_sequence)

    def build(self) -> Optional[GenerateParams]:
        """
        Finish the parameter set.

        Returns:
            The parameters, or None when neither max_length nor
            max_new_tokens has been set.
        """
        if not has_length_bound(
            self._fields.get("max_length"), self._fields.get("max_new_tokens")
        ):
            return None
        return GenerateParams(**self._fields)
