from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable


class INotificationDispatcher(ABC):
    @abstractmethod
    def dispatch(self, *, name: str, job: Callable[[], Awaitable[Any]]) -> None:
        """
        Queue a post-commit side effect and return immediately.

        `job` is called once per attempt. Failures are retried with backoff
        and finally logged; they never reach the caller.
        """
        pass
