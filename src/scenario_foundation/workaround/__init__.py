"""Workaround escalation: one workaround per page location, escalation on recurrence."""

from .ledger import (
    WorkaroundDialog,
    WorkaroundLedger,
    WorkaroundPage,
    WorkaroundRecord,
    normalize_location,
)

__all__ = [
    'WorkaroundDialog',
    'WorkaroundLedger',
    'WorkaroundPage',
    'WorkaroundRecord',
    'normalize_location',
]
