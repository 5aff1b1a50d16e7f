"""Back office domain value objects"""

from src.service.backoffice.domain.value_object.request_context import RequestContext
from src.service.backoffice.domain.value_object.ticket_payload import TicketPayload
from src.service.backoffice.domain.value_object.ticket_template import (
    TemplateLayout,
    TicketTemplate,
)

__all__ = ['RequestContext', 'TemplateLayout', 'TicketPayload', 'TicketTemplate']
