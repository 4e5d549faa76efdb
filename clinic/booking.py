"""
Patient-side booking: the doctor roster and the appointment form.
"""

import logging
from typing import List, Optional

from clinic import config
from clinic.appointments import parse_datetime
from clinic.errors import ValidationError
from clinic.models import Appointment, DoctorProfile

logger = logging.getLogger(__name__)


def load_doctors(store) -> List[DoctorProfile]:
    """Every doctor profile, fetched fresh on each call."""
    return [DoctorProfile.from_document(doc) for doc in store.get_all(config.DOCTORS)]


class BookingFlow:
    """
    Appointment form for one patient.

    The form is either hidden or visible (``toggle_form``).  A successful
    submission clears the fields but leaves the form open; a failed one
    leaves the fields as entered.
    """

    def __init__(self, store, patient_id: Optional[str] = None):
        self._store = store
        self.patient_id = patient_id
        self.form_visible = False
        self.clear_form()

    def toggle_form(self) -> bool:
        self.form_visible = not self.form_visible
        return self.form_visible

    def clear_form(self) -> None:
        self.doctor_id = ""
        self.date_time = ""
        self.notes = ""

    def submit_booking(self, doctor_id=None, date_time=None, notes=None) -> str:
        """
        Insert one appointment and return its generated id.

        Arguments override the corresponding form fields.  No conflict or
        duplicate check is made against existing appointments.

        Raises
        ------
        ValidationError
            Doctor or date/time missing, or the date/time does not parse.
        StorageError
            The insert failed.
        """
        if doctor_id is not None:
            self.doctor_id = doctor_id
        if date_time is not None:
            self.date_time = date_time
        if notes is not None:
            self.notes = notes

        if not self.doctor_id or not self.date_time:
            raise ValidationError("missing selection")
        when = parse_datetime(self.date_time)

        appointment = Appointment(
            doctor_id=self.doctor_id,
            patient_id=self.patient_id,
            date_time=when,
            notes=self.notes,
        )
        appointment_id = self._store.insert(config.APPOINTMENTS, appointment.to_document())
        logger.info("Appointment %s booked with %s", appointment_id, self.doctor_id)
        self.clear_form()
        return appointment_id
