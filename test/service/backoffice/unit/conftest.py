"""
Unit test configuration for the back office.

Every use case runs against InMemoryUnitOfWork; collaborators that leave
the process (proof storage, renderer, notifier) are mocks.
"""

import pytest

from test.service.backoffice.unit.helpers import InMemoryStore, InMemoryUnitOfWork


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow(store: InMemoryStore) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)
