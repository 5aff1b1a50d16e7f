"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.backoffice.driven_adapter.notification.mock_email_notifier import (
    MockEmailNotifier,
)
from src.service.backoffice.driven_adapter.notification.notification_dispatcher import (
    BackgroundNotificationDispatcher,
    RetryPolicy,
)
from src.service.backoffice.driven_adapter.renderer.qr_pdf_artifact_renderer import (
    QrPdfArtifactRenderer,
)
from src.service.backoffice.driven_adapter.security.hmac_signer import HmacSha256Signer
from src.service.backoffice.driven_adapter.state.duplicate_request_guard import (
    InMemoryDuplicateRequestGuard,
)
from src.service.backoffice.driven_adapter.storage.local_proof_storage import LocalProofStorage
from src.service.backoffice.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Ticket signing (pure, stateless)
    signer = providers.Singleton(
        HmacSha256Signer,
        secret=config_service.provided.QR_SECRET.get_secret_value.call(),
    )

    # Per-process duplicate request suppression (Singleton for shared cache)
    duplicate_guard = providers.Singleton(
        InMemoryDuplicateRequestGuard,
        ttl_seconds=config_service.provided.DUPLICATE_GUARD_TTL_SECONDS,
        max_entries=config_service.provided.DUPLICATE_GUARD_MAX_ENTRIES,
    )

    # Files
    proof_storage = providers.Singleton(
        LocalProofStorage,
        upload_dir=config_service.provided.UPLOAD_DIR,
        url_prefix=config_service.provided.UPLOAD_URL_PREFIX,
        max_bytes=config_service.provided.MAX_PROOF_FILE_BYTES,
    )
    artifact_renderer = providers.Singleton(
        QrPdfArtifactRenderer,
        upload_dir=config_service.provided.UPLOAD_DIR,
        url_prefix=config_service.provided.UPLOAD_URL_PREFIX,
        template_dir=config_service.provided.TICKET_TEMPLATE_DIR,
    )

    # Notifications (dispatcher.run() is started by main.py lifespan)
    notifier = providers.Singleton(
        MockEmailNotifier,
        sender=config_service.provided.MAIL_FROM,
        debug=config_service.provided.DEBUG,
    )
    notification_retry_policy = providers.Singleton(
        RetryPolicy,
        max_attempts=config_service.provided.NOTIFICATION_MAX_ATTEMPTS,
        base_delay=config_service.provided.NOTIFICATION_BASE_DELAY_SECONDS,
        max_delay=config_service.provided.NOTIFICATION_MAX_DELAY_SECONDS,
    )
    notification_dispatcher = providers.Singleton(
        BackgroundNotificationDispatcher,
        retry_policy=notification_retry_policy,
        queue_size=config_service.provided.NOTIFICATION_QUEUE_SIZE,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
