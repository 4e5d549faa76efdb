"""
Appointment timestamps and the doctor's live appointment list.
"""

import logging
import weakref
from datetime import datetime
from typing import List, Optional

from dateutil import parser

from clinic import config
from clinic.errors import ValidationError
from clinic.models import Appointment
from clinic.session import Lifetime

logger = logging.getLogger(__name__)


def parse_datetime(text: str) -> datetime:
    """
    Parse a booking form value such as ``2025-01-01T10:00``.

    Values without an offset are read as server-local time.
    """
    try:
        parsed = parser.isoparse(text)
    except (ValueError, OverflowError) as err:
        raise ValidationError("invalid date/time") from err
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_datetime(value) -> str:
    """Locale-formatted local time for a stored timestamp."""
    if isinstance(value, datetime):
        moment = value.astimezone()
    else:
        # backend Timestamp / {"seconds": ...} shapes
        seconds = value["seconds"] if isinstance(value, dict) else value.seconds
        moment = datetime.fromtimestamp(seconds)
    return moment.strftime("%x %X")


class AppointmentFeed:
    """
    Live list of the appointments addressed to one doctor.

    Each push from the store replaces ``appointments`` wholesale, sorted by
    appointment time.  After ``close`` no further push is applied.  The
    watch only holds a weak reference to the feed, and a feed that is
    garbage-collected without ``close`` releases its watch anyway.
    """

    def __init__(self, store):
        self._store = store
        self._lifetime = Lifetime()
        self.doctor_id: Optional[str] = None
        self.appointments: List[Appointment] = []
        weakref.finalize(self, self._lifetime.close)

    def open(self, doctor_id: str) -> None:
        self.doctor_id = doctor_id
        feed_ref = weakref.ref(self)

        def on_change(docs):
            feed = feed_ref()
            if feed is not None:
                feed._replace(docs)

        release = self._store.subscribe_query(
            config.APPOINTMENTS,
            ("doctorId", "==", doctor_id),
            self._lifetime.guard(on_change),
        )
        self._lifetime.own(release)
        logger.debug("Appointment feed opened for %s", doctor_id)

    def _replace(self, docs) -> None:
        self.appointments = sorted(
            (Appointment.from_document(doc) for doc in docs),
            key=lambda appt: appt.date_time,
        )

    def close(self) -> None:
        self._lifetime.close()
        logger.debug("Appointment feed closed for %s", self.doctor_id)
