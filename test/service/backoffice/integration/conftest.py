"""
Integration fixtures: a fresh in-memory SQLite database per test.

SQLite through aiosqlite needs two hooks before SAVEPOINT works: pysqlite's
own transaction handling is disabled and BEGIN is emitted explicitly.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import Base, get_async_session
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.types import generate_uuid7
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.user_role import UserRole
from src.service.backoffice.driven_adapter.model import PackModel
from src.service.backoffice.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        'sqlite+aiosqlite:///:memory:',
        poolclass=StaticPool,
        connect_args={'check_same_thread': False},
    )

    @event.listens_for(engine.sync_engine, 'connect')
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, 'begin')
    def _emit_begin(conn):
        conn.exec_driver_sql('BEGIN')

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sql_uow_factory(session_maker):
    """Each call gives a unit of work over a new session, like one request would"""

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_maker())

    return factory


@pytest_asyncio.fixture
async def pack(session_maker):
    model = PackModel(
        id=generate_uuid7(),
        name='VIP Pass',
        price=10000,
        capacity=2,
        ticket_template='vip',
        is_active=True,
        created_at=datetime.now(timezone.utc),
    )
    async with session_maker() as session:
        session.add(model)
        await session.commit()
    return model


# =============================================================================
# HTTP
# =============================================================================


@asynccontextmanager
async def _test_lifespan(app: FastAPI):
    yield


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app = create_app(lifespan=_test_lifespan, title_suffix=' (Test)')
    app.dependency_overrides[get_async_session] = override_session
    container.wire(modules=WIRE_MODULES)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url='http://test') as http_client:
        yield http_client

    container.unwire()
    container.reset_singletons()


def _token_for(role: UserRole) -> str:
    user = UserEntity(
        id=generate_uuid7(), email=f'{role.value}@test.com', name=role.value, role=role
    )
    return JwtAuth().create_jwt_token(user)


@pytest.fixture
def auth_headers():
    """auth_headers(UserRole.CASHIER) -> Authorization header for a fresh user of that role"""

    def headers(role: UserRole) -> dict[str, str]:
        return {'Authorization': f'Bearer {_token_for(role)}'}

    return headers
