from src.service.backoffice.driven_adapter.state.duplicate_request_guard import (
    InMemoryDuplicateRequestGuard,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryDuplicateRequestGuard:
    def test_second_identical_claim_is_rejected(self):
        guard = InMemoryDuplicateRequestGuard(ttl_seconds=10)

        assert guard.claim(scope='payment', parts=('r1', 100)) is not None
        assert guard.claim(scope='payment', parts=('r1', 100)) is None

    def test_different_parts_or_scope_are_independent(self):
        guard = InMemoryDuplicateRequestGuard(ttl_seconds=10)

        assert guard.claim(scope='payment', parts=('r1', 100)) is not None
        assert guard.claim(scope='payment', parts=('r1', 200)) is not None
        assert guard.claim(scope='reservation', parts=('r1', 100)) is not None

    def test_claim_expires_after_ttl(self):
        clock = FakeClock()
        guard = InMemoryDuplicateRequestGuard(ttl_seconds=10, clock=clock)
        guard.claim(scope='payment', parts=('r1',))

        clock.now = 10.0

        assert guard.claim(scope='payment', parts=('r1',)) is not None

    def test_release_allows_retry(self):
        guard = InMemoryDuplicateRequestGuard(ttl_seconds=10)
        fingerprint = guard.claim(scope='payment', parts=('r1',))

        guard.release(fingerprint)

        assert guard.claim(scope='payment', parts=('r1',)) is not None

    def test_oldest_entry_evicted_when_full(self):
        guard = InMemoryDuplicateRequestGuard(ttl_seconds=10, max_entries=2)
        guard.claim(scope='s', parts=(1,))
        guard.claim(scope='s', parts=(2,))
        guard.claim(scope='s', parts=(3,))

        assert guard.claim(scope='s', parts=(1,)) is not None
        assert guard.claim(scope='s', parts=(3,)) is None
