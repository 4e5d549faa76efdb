"""
Dashboard state for the two signed-in roles.

A dashboard is mounted once per signed-in session and kept in
``st.session_state``; Streamlit reruns only redraw it.  Unmounting
releases the auth listener and, for doctors, the appointment feed; a
dashboard dropped with its session does the same when collected.
"""

import logging
import weakref
from dataclasses import dataclass
from typing import List, Optional

from clinic import config
from clinic.appointments import AppointmentFeed
from clinic.booking import BookingFlow, load_doctors
from clinic.errors import StorageError
from clinic.models import DoctorProfile, PatientProfile
from clinic.profiles import ProfileManager
from clinic.schedule import SlotManager
from clinic.session import Lifetime, Navigator, SessionGate

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """Backend handles passed explicitly into every dashboard."""

    store: object
    auth: object
    navigator: Navigator


class Dashboard:
    route = config.LOGIN_ROUTE

    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.lifetime = Lifetime()
        self.gate = SessionGate(ctx.auth, ctx.navigator, self.lifetime)
        self.load_error: Optional[str] = None
        # an abandoned session still releases its listeners once collected
        weakref.finalize(self, self.lifetime.close)

    @property
    def user_id(self) -> Optional[str]:
        return self.gate.user_id

    @property
    def mounted(self) -> bool:
        return not self.lifetime.closed

    def mount(self) -> None:
        signed_in = weakref.WeakMethod(self._signed_in)

        def on_signed_in(user_id):
            method = signed_in()
            if method is not None:
                method(user_id)

        self.gate.mount(self.lifetime.guard(on_signed_in))

    def _signed_in(self, user_id: str) -> None:
        # runs inside the auth listener; keep failures on the dashboard
        self.load_error = None
        try:
            self.on_signed_in(user_id)
        except StorageError as err:
            logger.error("Loading %s for %s failed: %s", self.route, user_id, err)
            self.load_error = str(err)

    def on_signed_in(self, user_id: str) -> None:
        raise NotImplementedError

    def unmount(self) -> None:
        self.lifetime.close()
        logger.debug("%s unmounted", type(self).__name__)

    def sign_out(self) -> None:
        self.unmount()
        self.ctx.auth.sign_out()
        self.ctx.navigator.redirect(config.LOGIN_ROUTE)


class DoctorDashboard(Dashboard):
    route = config.DOCTOR_ROUTE

    def __init__(self, ctx: Context):
        super().__init__(ctx)
        self.profile = ProfileManager(ctx.store, config.DOCTORS, DoctorProfile)
        self.schedule = SlotManager()
        self.feed = AppointmentFeed(ctx.store)
        self.lifetime.own(self.feed.close)

    def on_signed_in(self, user_id: str) -> None:
        self.profile.load_profile(user_id)
        if self.feed.doctor_id is None:
            self.feed.open(user_id)


class PatientDashboard(Dashboard):
    route = config.PATIENT_ROUTE

    def __init__(self, ctx: Context):
        super().__init__(ctx)
        self.profile = ProfileManager(ctx.store, config.PATIENTS, PatientProfile)
        self.booking = BookingFlow(ctx.store)
        self.doctors: List[DoctorProfile] = []

    def on_signed_in(self, user_id: str) -> None:
        self.booking.patient_id = user_id
        self.profile.load_profile(user_id)
        doctors = load_doctors(self.ctx.store)
        if self.mounted:
            self.doctors = doctors
