"""
Unit tests for BackgroundNotificationDispatcher

Focus:
1. Failed jobs are retried with backoff, then given up on (never raised)
2. dispatch() never blocks; a full or closed queue drops the job
3. run() drains the queue and returns after close()
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.service.backoffice.driven_adapter.notification.notification_dispatcher import (
    BackgroundNotificationDispatcher,
    RetryPolicy,
)


class TestRetryPolicy:
    def test_exponential_without_jitter(self):
        policy = RetryPolicy(base_delay=1.0, max_delay=30.0, jitter=False)

        assert [policy.delay_for(a) for a in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_max_delay(self):
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=False)

        assert policy.delay_for(10) == 5.0

    def test_jitter_keeps_half_to_full_delay(self):
        policy = RetryPolicy(base_delay=4.0, jitter=True)

        for _ in range(20):
            assert 2.0 <= policy.delay_for(1) <= 4.0


class TestBackgroundNotificationDispatcher:
    @pytest.fixture
    def sleep(self):
        return AsyncMock()

    @pytest.fixture
    def dispatcher(self, sleep):
        return BackgroundNotificationDispatcher(
            retry_policy=RetryPolicy(max_attempts=3, base_delay=1.0, jitter=False),
            queue_size=2,
            sleep=sleep,
        )

    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self, dispatcher, sleep):
        job = AsyncMock(side_effect=[RuntimeError('smtp down'), RuntimeError('smtp down'), None])

        assert await dispatcher.execute('payment_confirmation', job) is True

        assert job.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts_without_raising(self, dispatcher, sleep):
        job = AsyncMock(side_effect=RuntimeError('smtp down'))

        assert await dispatcher.execute('ticket_delivery', job) is False

        assert job.await_count == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_full_queue_drops_instead_of_blocking(self, dispatcher):
        job = AsyncMock()

        for _ in range(3):
            dispatcher.dispatch(name='payment_confirmation', job=job)

        await dispatcher.close()
        await dispatcher.run()
        assert job.await_count == 2

    @pytest.mark.asyncio
    async def test_run_executes_queued_jobs_until_closed(self, dispatcher):
        done = anyio.Event()
        calls = []

        async def job() -> None:
            calls.append('sent')
            done.set()

        async with anyio.create_task_group() as tg:
            tg.start_soon(dispatcher.run)
            dispatcher.dispatch(name='reservation_confirmation', job=job)
            with anyio.fail_after(1):
                await done.wait()
            await dispatcher.close()

        assert calls == ['sent']

    @pytest.mark.asyncio
    async def test_dispatch_after_close_is_dropped(self, dispatcher):
        job = AsyncMock()
        await dispatcher.close()

        dispatcher.dispatch(name='payment_confirmation', job=job)

        job.assert_not_awaited()
