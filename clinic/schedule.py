"""
Availability slots for the doctor dashboard.

Slots are kept for the current session only.  Nothing is persisted and
no slot is checked against another.
"""

import logging
from typing import List

from clinic.errors import ValidationError
from clinic.models import AvailabilitySlot

logger = logging.getLogger(__name__)


class SlotManager:
    def __init__(self):
        self.slots: List[AvailabilitySlot] = []
        self.clear_form()

    def clear_form(self) -> None:
        self.start_time = ""
        self.end_time = ""
        self.available = False

    def add_slot(self, start_time: str, end_time: str, available: bool = False) -> AvailabilitySlot:
        """Append a slot in insertion order and clear the form."""
        if not start_time or not end_time:
            raise ValidationError("Please select start and end time.")
        slot = AvailabilitySlot(start_time=start_time, end_time=end_time, available=available)
        self.slots.append(slot)
        logger.debug("Slot %s-%s added (available=%s)", start_time, end_time, available)
        self.clear_form()
        return slot

    def submit(self) -> AvailabilitySlot:
        """Add a slot from the values currently held in the form."""
        return self.add_slot(self.start_time, self.end_time, self.available)
