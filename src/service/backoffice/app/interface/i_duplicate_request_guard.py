from abc import ABC, abstractmethod


class IDuplicateRequestGuard(ABC):
    """Best-effort, per-process suppression of identical requests sent twice in a short window"""

    @abstractmethod
    def claim(self, *, scope: str, parts: tuple[object, ...]) -> str | None:
        """Return the fingerprint if claimed, None if an identical request is still in the window"""
        pass

    @abstractmethod
    def release(self, fingerprint: str) -> None:
        pass
