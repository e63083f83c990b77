from enum import Enum


class Model(str, Enum):
    """
    Models served by the Petals swarm.

    Each member's value is the identifier sent over the wire.
    """

    LLAMA_2_70B_CHAT_HF = "meta-llama/Llama-2-70b-chat-hf"
    STABLE_BELUGA_2 = "stabilityai/StableBeluga2"
    GUANACO_65B = "timdettmers/guanaco-65b"
    LLAMA_65B_HF = "enoch/llama-65b-hf"
    BLOOMZ = "bigscience/bloomz"

    @classmethod
    def from_wire(cls, name: str) -> "Model":
        """
        Resolve a wire identifier such as "bigscience/bloomz".

        Raises:
            ValueError: If the identifier is not a supported model.
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unsupported model identifier: {name!r}") from None

    def __str__(self) -> str:
        return self.value
