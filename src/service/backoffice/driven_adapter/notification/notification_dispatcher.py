"""
Background Notification Dispatcher

Post-commit side effects (emails, ticket delivery) are queued here and run
outside the request. A failing job is retried with exponential backoff and
jitter, then logged; it never reaches the caller and never undoes the
committed business change.

Lifecycle:
- main.py lifespan starts run() inside its anyio task group
- dispatch() is non-blocking; a full or closed queue drops the job (logged)
- close() ends the queue; run() returns once every queued job finished
"""

import random
from typing import Any, Awaitable, Callable

import anyio
import attrs

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.backoffice_metrics import metrics
from src.service.backoffice.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)


Job = Callable[[], Awaitable[Any]]


@attrs.frozen
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def delay_for(self, attempt: int) -> float:
        """Exponential backoff capped at max_delay; jitter keeps 50-100% of it"""
        delay = min(self.base_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random() * 0.5
        return delay


class BackgroundNotificationDispatcher(INotificationDispatcher):
    def __init__(
        self,
        *,
        retry_policy: RetryPolicy | None = None,
        queue_size: int = 1000,
        sleep: Callable[[float], Awaitable[Any]] = anyio.sleep,
    ) -> None:
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream[
            tuple[str, Job]
        ](max_buffer_size=queue_size)

    def dispatch(self, *, name: str, job: Job) -> None:
        try:
            self._send_stream.send_nowait((name, job))
            metrics.notification_queue_depth.inc()
        except anyio.WouldBlock:
            Logger.base.warning(f'⚠️ [DISPATCHER] Queue full, dropping {name}')
            metrics.record_notification(name=name, result='dropped')
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            Logger.base.warning(f'⚠️ [DISPATCHER] Dispatcher closed, dropping {name}')
            metrics.record_notification(name=name, result='dropped')

    async def run(self) -> None:
        Logger.base.info('📬 [DISPATCHER] Started')
        async with anyio.create_task_group() as tg:
            async with self._receive_stream:
                async for name, job in self._receive_stream:
                    metrics.notification_queue_depth.dec()
                    tg.start_soon(self.execute, name, job)
        Logger.base.info('📬 [DISPATCHER] Stopped')

    async def execute(self, name: str, job: Job) -> bool:
        """Run one job with retries. Returns whether it eventually succeeded."""
        policy = self.retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                await job()
            except Exception as e:
                if attempt >= policy.max_attempts:
                    Logger.base.opt(exception=e).error(
                        f'❌ [DISPATCHER] {name} failed after {attempt} attempts: {e}'
                    )
                    metrics.record_notification(name=name, result='failed')
                    return False

                delay = policy.delay_for(attempt)
                Logger.base.warning(
                    f'🔁 [DISPATCHER] {name} attempt {attempt}/{policy.max_attempts} failed: {e}. '
                    f'Retrying in {delay:.2f}s'
                )
                metrics.record_notification(name=name, result='retried')
                await self._sleep(delay)
            else:
                metrics.record_notification(name=name, result='sent')
                return True
        return False

    async def close(self) -> None:
        await self._send_stream.aclose()
