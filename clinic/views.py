"""
Streamlit renderers for the doctor and patient dashboards.

Widget values live in ``st.session_state`` under ``<role>.<field>`` keys.
Buttons act through ``on_click`` callbacks so a callback can reset the
widgets it owns before the next run draws them.
"""

import streamlit as st

from clinic import config
from clinic.appointments import format_datetime
from clinic.errors import StorageError, ValidationError

DOCTOR_LABELS = {"name": "Name", "specialization": "Specialization"}
PATIENT_LABELS = {
    "name": "Name",
    "contact_details": "Contact Details",
    "medical_history": "Medical History",
}
TEXT_AREAS = {"medical_history"}


# ───────────────────────────────────────────────────────────────
# Flash messages survive the rerun that follows a callback
# ───────────────────────────────────────────────────────────────
def flash(kind: str, message: str) -> None:
    st.session_state.setdefault("flash", []).append((kind, message))


def show_flash() -> None:
    for kind, message in st.session_state.pop("flash", []):
        getattr(st, kind)(message)


def _sidebar(dash) -> None:
    with st.sidebar:
        st.caption(f"Signed in as {dash.ctx.auth.current.email}" if dash.ctx.auth.current else "")
        st.button("Logout", on_click=dash.sign_out, width="stretch")


# ───────────────────────────────────────────────────────────────
# Profile card (shared)
# ───────────────────────────────────────────────────────────────
def _begin_edit(manager, prefix, labels):
    manager.begin_edit()
    for field in labels:
        st.session_state[f"{prefix}.{field}"] = getattr(manager.draft, field)


def _save_profile(manager, prefix, labels, user_id, noun):
    values = {field: st.session_state.get(f"{prefix}.{field}", "") for field in labels}
    try:
        manager.save_profile(user_id, values)
    except StorageError as e:
        flash("error", f"Error saving details: {e}")
        return
    flash("success", f"{noun} details saved successfully.")


def _profile_card(dash, prefix, labels, noun):
    manager = dash.profile
    if manager.is_editing:
        for field, label in labels.items():
            widget = st.text_area if field in TEXT_AREAS else st.text_input
            widget(f"{label}:", key=f"{prefix}.{field}")
        st.button("Save Details", type="primary", width="stretch",
                  on_click=_save_profile, args=(manager, prefix, labels, dash.user_id, noun))
        st.button("Cancel", width="stretch", on_click=manager.cancel_edit)
    else:
        for field, label in labels.items():
            st.markdown(f"**{label}:** {getattr(manager.profile, field)}")
        st.button("Edit Details", on_click=_begin_edit, args=(manager, prefix, labels))


# ───────────────────────────────────────────────────────────────
# Doctor dashboard
# ───────────────────────────────────────────────────────────────
def _add_slot(schedule):
    start = st.session_state.get("doctor.start_time")
    end = st.session_state.get("doctor.end_time")
    schedule.start_time = start.isoformat(timespec="minutes") if start else ""
    schedule.end_time = end.isoformat(timespec="minutes") if end else ""
    schedule.available = st.session_state.get("doctor.available", False)
    try:
        schedule.submit()
    except ValidationError as e:
        flash("error", str(e))
        return
    st.session_state["doctor.start_time"] = None
    st.session_state["doctor.end_time"] = None
    st.session_state["doctor.available"] = False
    flash("success", "Slot added successfully!")


@st.fragment(run_every=config.FEED_REFRESH_SECONDS)
def _appointment_list(feed):
    appointments = list(feed.appointments)
    if not appointments:
        st.write("No upcoming appointments")
    for appt in appointments:
        with st.container(border=True):
            st.markdown(f"**Date & Time:** {format_datetime(appt.date_time)}")
            st.markdown(f"**Notes:** {appt.notes}")


def render_doctor(dash) -> None:
    _sidebar(dash)
    st.title("Doctor Dashboard")
    if dash.load_error:
        st.error(dash.load_error)

    details, schedule, appointments = st.tabs(["Details", "Schedule", "Appointments"])
    with details:
        st.subheader("Doctor Details")
        _profile_card(dash, "doctor", DOCTOR_LABELS, "Doctor")

    with schedule:
        st.subheader("Manage Schedule")
        st.time_input("Start Time:", value=None, key="doctor.start_time")
        st.time_input("End Time:", value=None, key="doctor.end_time")
        st.checkbox("Available", key="doctor.available")
        st.button("Add Slot", type="primary", width="stretch",
                  on_click=_add_slot, args=(dash.schedule,))

        st.subheader("Current Schedule")
        for slot in dash.schedule.slots:
            st.markdown(
                f"**Start:** {slot.start_time} | **End:** {slot.end_time} | "
                f"**Available:** {'Yes' if slot.available else 'No'}"
            )

    with appointments:
        st.subheader("Upcoming Appointments")
        _appointment_list(dash.feed)


# ───────────────────────────────────────────────────────────────
# Patient dashboard
# ───────────────────────────────────────────────────────────────
def _book(flow):
    day = st.session_state.get("patient.date")
    time = st.session_state.get("patient.time")
    date_time = f"{day.isoformat()}T{time.isoformat(timespec='minutes')}" if day and time else ""
    try:
        flow.submit_booking(
            doctor_id=st.session_state.get("patient.doctor", ""),
            date_time=date_time,
            notes=st.session_state.get("patient.notes", ""),
        )
    except ValidationError as e:
        if str(e) == "missing selection":
            flash("error", "Please select a doctor and choose a date/time.")
        else:
            flash("error", "Invalid date/time format. Please ensure it is correctly selected.")
        return
    except StorageError as e:
        flash("error", f"Error booking appointment: {e}")
        return
    st.session_state["patient.doctor"] = ""
    st.session_state["patient.date"] = None
    st.session_state["patient.time"] = None
    st.session_state["patient.notes"] = ""
    flash("success", "Appointment booked successfully!")


def render_patient(dash) -> None:
    _sidebar(dash)
    st.title("Patient Dashboard")
    if dash.load_error:
        st.error(dash.load_error)

    with st.container(border=True):
        st.subheader("Your Details")
        _profile_card(dash, "patient", PATIENT_LABELS, "Patient")

    flow = dash.booking
    st.button("Hide Appointment Form" if flow.form_visible else "Book an Appointment",
              on_click=flow.toggle_form)
    if not flow.form_visible:
        return

    labels = {doc.id: doc.label for doc in dash.doctors}
    with st.container(border=True):
        st.subheader("Book an Appointment")
        st.selectbox("Select Doctor:", [""] + list(labels), key="patient.doctor",
                     format_func=lambda doc_id: labels.get(doc_id, "Select a doctor"))
        st.date_input("Appointment Date:", value=None, key="patient.date")
        st.time_input("Appointment Time:", value=None, key="patient.time")
        st.text_area("Notes:", key="patient.notes")
        st.button("Book Appointment", type="primary", width="stretch",
                  on_click=_book, args=(flow,))


RENDERERS = {
    config.DOCTOR_ROUTE: render_doctor,
    config.PATIENT_ROUTE: render_patient,
}
