from typing import Awaitable, Callable, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header, Request
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.backoffice.domain.entity.user_entity import UserEntity
from src.service.backoffice.domain.enum.permission import Permission
from src.service.backoffice.domain.permission_policy import has_permission
from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    return token.strip() if scheme.lower() == 'bearer' and token.strip() else None


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    authorization: Optional[str] = Header(None),
    cookie_token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME),
) -> UserEntity:
    """Bearer header first, auth cookie second (stateless, no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(_bearer_token(authorization) or cookie_token)


def require_permission(permission: Permission) -> Callable[..., Awaitable[UserEntity]]:
    async def dependency(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(
            'auth.require_permission',
            attributes={
                'user.id': str(current_user.id),
                'user.role': current_user.role.value,
                'permission': permission.value,
            },
        ):
            if not has_permission(current_user.role, permission):
                raise ForbiddenError('Insufficient permissions')
            return current_user

    return dependency


def get_request_context(request: Request) -> RequestContext:
    forwarded = request.headers.get('x-forwarded-for')
    ip_address = forwarded.split(',')[0].strip() if forwarded else None
    if not ip_address and request.client:
        ip_address = request.client.host
    return RequestContext(ip_address=ip_address, user_agent=request.headers.get('user-agent'))
