"""
Clinic dashboards on Firestore.

Re-exports the pieces a Streamlit page needs:

    from clinic import Context, DoctorDashboard, PatientDashboard
"""
from .dashboards import Context, DoctorDashboard, PatientDashboard   # re‑export for convenience
from .errors import AuthError, NotFoundError, StorageError, ValidationError

__all__ = [
    "Context",
    "DoctorDashboard",
    "PatientDashboard",
    "AuthError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
