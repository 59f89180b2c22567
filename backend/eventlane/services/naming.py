"""
Ticket labels, product/variation titles and SKUs.

Titles follow "{event title} – {ticket label}". When the event is renamed the
label suffix is carried over unchanged onto the new event title.
"""

import re
import uuid
from typing import Collection, Optional
from uuid import UUID

from eventlane.domain import TITLE_DELIMITER, LabelMode, Product, TicketTypeConfig, Variation

PRESET_LABELS = {
    "full_price": "Full Price",
    "concession": "Concession",
    "child": "Child",
    "member": "Member",
    "free": "Free",
    "student": "Student",
    "senior": "Senior",
    "early_bird": "Early Bird",
    "vip": "VIP",
}

DEFAULT_TICKET_LABEL = "Ticket"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def resolve_ticket_label(config: TicketTypeConfig) -> str:
    """Custom label, then preset display name, then "Ticket"."""
    if config.label_mode == LabelMode.CUSTOM:
        custom = (config.custom_label or "").strip()
        if custom:
            return custom

    preset = (config.preset_key or "").strip()
    if preset:
        return PRESET_LABELS.get(preset, preset.replace("_", " ").title())

    return DEFAULT_TICKET_LABEL


def compose_title(event_title: str, label: str) -> str:
    return f"{event_title}{TITLE_DELIMITER}{label}"


def label_suffix(title: str, previous_event_title: Optional[str] = None) -> Optional[str]:
    """Return the ticket label part of a variation title, or None if it has none."""
    if previous_event_title:
        prefix = f"{previous_event_title}{TITLE_DELIMITER}"
        if title.startswith(prefix):
            return title[len(prefix):]

    _head, delimiter, tail = title.partition(TITLE_DELIMITER)
    return tail if delimiter else None


def retitle_variations(
    product: Product,
    event_title: str,
    previous_event_title: Optional[str] = None,
    skip: Collection[UUID] = (),
) -> list[Variation]:
    """Re-derive variation titles from the event title. Returns the changed ones.

    Variations in `skip` already carry a current title.
    """
    changed = []
    for variation in product.variations:
        if variation.handle in skip:
            continue
        suffix = label_suffix(variation.title, previous_event_title)
        if suffix is None:
            continue
        title = compose_title(event_title, suffix)
        if title != variation.title:
            variation.title = title
            changed.append(variation)
    return changed


def slugify(label: str) -> str:
    return _NON_ALNUM.sub("-", label.lower()).strip("-")


def generate_sku(prefix: str, event_id: Optional[int], label: str) -> str:
    """SKU unique by construction: a random suffix instead of a timestamp salt."""
    slug = slugify(label) or "ticket"
    event_part = event_id if event_id is not None else "new"
    return f"{prefix}-{event_part}-{slug}-{uuid.uuid4().hex[:12]}"
