from uuid import uuid4

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.backoffice.app.interface.i_audit_log_repo import AuditLogFilter
from src.service.backoffice.app.query.list_audit_logs_use_case import ListAuditLogsUseCase
from src.service.backoffice.domain.entity.audit_log_entity import AuditLogEntry
from src.service.backoffice.domain.enum.audit_action import AuditAction, AuditEntityType


def _seed(store, *, action, reservation_id=None, actor_id=None):
    entry = AuditLogEntry.record(
        action=action,
        entity_type=AuditEntityType.RESERVATION,
        entity_id=reservation_id,
        actor_id=actor_id,
        permission=None,
        reservation_id=reservation_id,
        changes={},
    )
    store.audit_logs[entry.id] = entry
    return entry


class TestListAuditLogs:
    @pytest.mark.asyncio
    async def test_filters_and_paginates_newest_first(self, store, uow):
        reservation_id, actor_id = uuid4(), uuid4()
        older = _seed(store, action=AuditAction.RESERVATION_CREATE, reservation_id=reservation_id)
        newer = _seed(
            store,
            action=AuditAction.RESERVATION_CANCEL,
            reservation_id=reservation_id,
            actor_id=actor_id,
        )
        _seed(store, action=AuditAction.RESERVATION_CREATE, reservation_id=uuid4())

        page = await ListAuditLogsUseCase(uow=uow).execute(
            filters=AuditLogFilter(reservation_id=reservation_id), limit=1, offset=0
        )
        assert page.total == 2
        assert [e.id for e in page.data] == [newer.id]

        page = await ListAuditLogsUseCase(uow=uow).execute(
            filters=AuditLogFilter(reservation_id=reservation_id), limit=1, offset=1
        )
        assert [e.id for e in page.data] == [older.id]

        page = await ListAuditLogsUseCase(uow=uow).execute(
            filters=AuditLogFilter(actor_id=actor_id, action='reservation.cancel')
        )
        assert [e.id for e in page.data] == [newer.id]

    @pytest.mark.asyncio
    async def test_unfiltered(self, store, uow):
        for _ in range(3):
            _seed(store, action=AuditAction.PAYMENT_ADD)

        page = await ListAuditLogsUseCase(uow=uow).execute()

        assert page.total == 3
        assert page.limit == 50
        assert page.offset == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize('limit,offset', [(0, 0), (201, 0), (10, -1)])
    async def test_rejects_bad_paging(self, uow, limit, offset):
        with pytest.raises(ValidationError):
            await ListAuditLogsUseCase(uow=uow).execute(limit=limit, offset=offset)
