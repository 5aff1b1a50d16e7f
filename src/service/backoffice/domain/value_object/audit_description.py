from types import MappingProxyType
from typing import Any, Callable, Mapping

from src.service.backoffice.domain.enum.audit_action import AuditAction


def _amount(changes: Mapping[str, Any]) -> str:
    return f'{int(changes.get("amount", 0)):,}'


def _fields(changes: Mapping[str, Any]) -> str:
    return ', '.join(sorted(changes.get('fields') or []))


ACTION_DESCRIPTIONS: Mapping[str, Callable[[Mapping[str, Any]], str]] = MappingProxyType(
    {
        AuditAction.RESERVATION_CREATE: lambda c: f'Reservation created for {c.get("payer_name")}',
        AuditAction.RESERVATION_UPDATE: lambda c: f'Reservation contact updated ({_fields(c)})',
        AuditAction.RESERVATION_CANCEL: lambda c: 'Reservation cancelled',
        AuditAction.RESERVATION_DELETE: lambda c: (
            f'Reservation permanently deleted ({c.get("payments_count", 0)} payments purged)'
        ),
        AuditAction.PAYMENT_ADD: lambda c: f'Payment added: {_amount(c)} ({c.get("method")})',
        AuditAction.PAYMENT_DELETE: lambda c: f'Payment deleted: {_amount(c)}',
        AuditAction.TICKET_GENERATE: lambda c: f'Ticket generated: {c.get("ticket_number")}',
        AuditAction.TICKET_REGENERATE_ARTIFACTS: lambda c: (
            f'Ticket artifacts regenerated: {c.get("ticket_number")}'
        ),
        AuditAction.TICKET_SCANNED: lambda c: f'Ticket scanned: {c.get("ticket_number")}',
        AuditAction.ENTRY_VALIDATE: lambda c: (
            f'Entry validated (participants: {len(c.get("participant_ids") or []) or 1})'
        ),
    }
)


def describe_action(action: str, changes: Mapping[str, Any]) -> str:
    formatter = ACTION_DESCRIPTIONS.get(action)
    return formatter(changes) if formatter else action
