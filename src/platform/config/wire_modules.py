"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.backoffice.app.command import (
    add_payment_use_case,
    create_reservation_use_case,
    create_ticket_use_case,
    delete_payment_use_case,
    delete_reservation_use_case,
    regenerate_ticket_artifacts_use_case,
)
from src.service.backoffice.app.query import decode_ticket_use_case
from src.service.backoffice.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    add_payment_use_case,
    delete_payment_use_case,
    create_reservation_use_case,
    delete_reservation_use_case,
    create_ticket_use_case,
    regenerate_ticket_artifacts_use_case,
    decode_ticket_use_case,
    role_auth,
]
