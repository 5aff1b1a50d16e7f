from abc import ABC, abstractmethod


class ISigner(ABC):
    """Keyed signature over ticket payload messages. Pure, no I/O."""

    @abstractmethod
    def sign(self, message: str) -> str:
        pass

    @abstractmethod
    def verify(self, message: str, signature: str) -> bool:
        pass
