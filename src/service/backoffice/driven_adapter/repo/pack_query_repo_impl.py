from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_pack_query_repo import IPackQueryRepo
from src.service.backoffice.domain.entity.pack_entity import Pack
from src.service.backoffice.driven_adapter.model.pack_model import PackModel


class PackQueryRepoImpl(IPackQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, pack_id: UUID) -> Pack | None:
        result = await self.session.execute(select(PackModel).where(PackModel.id == pack_id))
        model = result.scalar_one_or_none()
        if not model:
            return None
        return Pack(
            id=model.id,
            name=model.name,
            price=model.price,
            description=model.description,
            capacity=model.capacity,
            ticket_template=model.ticket_template,
            is_active=model.is_active,
            created_at=model.created_at,
        )
