"""
Purchase-order resolution.

A project carries up to three PO numbers (hardware, software, combined) and a
set of active PO slots. When an invoice is drafted, the default PO number is
picked from that configuration and the invoice type:

1. With a non-empty active set: the slot mapped from the invoice type
   (hardware -> hardware, service -> software) if it is active and numbered,
   else the combined PO if it has a number, else the first active slot that
   has a number.
2. With no active set: the first defined of combined, hardware, software.
3. Nothing defined: empty string, the PO stays free text.

Older records store a single ``current_po`` instead of the active set; it is
folded into the set by :func:`normalize_active_pos` before resolution.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from apps.projects.models import Project, POType, PO_FIELDS


# Invoice type -> PO slot
TYPE_TO_PO = {
    'hardware': POType.HARDWARE,
    'service': POType.SOFTWARE,
}

# Fallback order when nothing is marked active
FALLBACK_ORDER = (POType.COMBINED, POType.HARDWARE, POType.SOFTWARE)

# Canonical ordering of an active set
CANONICAL_ORDER = (POType.HARDWARE, POType.SOFTWARE, POType.COMBINED)


@dataclass(frozen=True)
class POResolution:
    default: str
    options: list = field(default_factory=list)

    @property
    def requires_choice(self) -> bool:
        """More than one eligible PO: the user picks instead of auto-fill."""
        return len(self.options) > 1


def normalize_active_pos(active_pos: Optional[Iterable[str]] = None,
                         current_po: Optional[str] = None) -> list:
    """
    Return the canonical active PO list.

    Unknown slot names are dropped, duplicates collapse and the result is in
    hardware, software, combined order. ``current_po`` is only consulted when
    ``active_pos`` is empty.
    """
    selected = set(active_pos or ())
    if not selected and current_po:
        selected = {current_po}
    return [po_type.value for po_type in CANONICAL_ORDER if po_type.value in selected]


def _number(project: Project, po_type) -> str:
    return (getattr(project, PO_FIELDS[po_type]) or '').strip()


def eligible_pos(project: Project) -> list:
    """
    Return ``(po_type, number)`` pairs the user may choose from.

    Active slots with a number, or every defined slot when nothing is active.
    """
    active = normalize_active_pos(project.active_pos)
    if active:
        candidates = [POType(value) for value in active]
    else:
        candidates = list(FALLBACK_ORDER)

    return [
        (po_type.value, _number(project, po_type))
        for po_type in candidates
        if _number(project, po_type)
    ]


def resolve_default_po(project: Project, invoice_type: Optional[str] = None) -> str:
    """Pick the initial PO number for an invoice of ``invoice_type``."""
    active = normalize_active_pos(project.active_pos)

    if active:
        mapped = TYPE_TO_PO.get(invoice_type)
        if mapped and mapped.value in active and _number(project, mapped):
            return _number(project, mapped)

        if _number(project, POType.COMBINED):
            return _number(project, POType.COMBINED)

        for value in active:
            number = _number(project, POType(value))
            if number:
                return number
        return ''

    for po_type in FALLBACK_ORDER:
        number = _number(project, po_type)
        if number:
            return number
    return ''


def resolve_po(project: Project, invoice_type: Optional[str] = None) -> POResolution:
    """Default PO plus the list of eligible choices."""
    return POResolution(
        default=resolve_default_po(project, invoice_type),
        options=[
            {'po_type': po_type, 'number': number}
            for po_type, number in eligible_pos(project)
        ],
    )
