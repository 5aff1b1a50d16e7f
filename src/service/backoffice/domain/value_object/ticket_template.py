"""
Ticket template configuration.

Each pack carries a TicketTemplate value which is snapshotted onto the
reservation; unknown or missing values resolve to FALLBACK_TEMPLATE.
Coordinates are in PDF points on a 1280x400 page, origin top-left.
"""

from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

import attrs


class TicketTemplate(StrEnum):
    VIP = 'vip'
    SIMPLE = 'simple'
    FAMILY = 'family'
    COUPLE = 'couple'


@attrs.frozen
class TemplateLayout:
    image_name: str
    width: int = 1280
    height: int = 400
    qr_x: int = 902
    qr_y: int = 113
    qr_size: int = 186
    label_x: int = 900
    label_y: int = 340


FALLBACK_TEMPLATE = TicketTemplate.SIMPLE

TEMPLATE_LAYOUTS: Mapping[TicketTemplate, TemplateLayout] = MappingProxyType(
    {
        TicketTemplate.VIP: TemplateLayout(image_name='vip_soolouf.jpg'),
        TicketTemplate.SIMPLE: TemplateLayout(image_name='simple_soolouf.jpg'),
        TicketTemplate.FAMILY: TemplateLayout(image_name='famille_soolouf.jpg'),
        TicketTemplate.COUPLE: TemplateLayout(image_name='couple_soolouf.jpg'),
    }
)


def resolve_ticket_template(value: str | None) -> TicketTemplate:
    if not value:
        return FALLBACK_TEMPLATE
    try:
        return TicketTemplate(value.strip().lower())
    except ValueError:
        return FALLBACK_TEMPLATE


def layout_for(template: TicketTemplate) -> TemplateLayout:
    return TEMPLATE_LAYOUTS.get(template, TEMPLATE_LAYOUTS[FALLBACK_TEMPLATE])
