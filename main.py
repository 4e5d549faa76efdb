"""
main.py  –  Streamlit clinic dashboards on Firestore
────────────────────────────────────────────────────
Run with:
    streamlit run main.py

Doctors keep their profile and availability slots and watch their
appointments arrive; patients keep their profile and book appointments.
"""

import streamlit as st

from clinic import config
from clinic.auth import FirebaseAuth, login_pane
from clinic.dashboards import Context, DoctorDashboard, PatientDashboard
from clinic.db import FirestoreStore, get_client
from clinic.session import Navigator
from clinic.views import RENDERERS, show_flash

config.configure_logging()

DASHBOARDS = {
    config.DOCTOR_ROUTE: DoctorDashboard,
    config.PATIENT_ROUTE: PatientDashboard,
}


# ───────────────────────────────────────────────────────────────
# 1.  Process-wide handles (one Firestore client, one API key)
# ───────────────────────────────────────────────────────────────
@st.cache_resource
def get_store() -> FirestoreStore:
    return FirestoreStore(get_client())


@st.cache_resource
def get_api_key() -> str:
    return config.get_firebase_api_key()


# ───────────────────────────────────────────────────────────────
# 2.  Per-browser-session context
# ───────────────────────────────────────────────────────────────
if "auth" not in st.session_state:
    st.session_state["auth"] = FirebaseAuth(get_api_key())

ctx = Context(
    store=get_store(),
    auth=st.session_state["auth"],
    navigator=Navigator(st.session_state, st.rerun),
)


# ───────────────────────────────────────────────────────────────
# 3.  Route → dashboard (mounted once, unmounted when left)
# ───────────────────────────────────────────────────────────────
route = ctx.navigator.path
dash = st.session_state.get("dashboard")
if dash is not None and (dash.route != route or not dash.mounted):
    dash.unmount()
    del st.session_state["dashboard"]
    dash = None

show_flash()

if route in DASHBOARDS:
    if dash is None:
        dash = DASHBOARDS[route](ctx)
        st.session_state["dashboard"] = dash
        dash.mount()
    if dash.user_id:
        RENDERERS[route](dash)
else:
    login_pane(ctx.auth, ctx.navigator)

ctx.navigator.settle()
