"""
Runtime settings for the clinic dashboards.

Values come from the process environment, optionally seeded from a local
``.env`` file.  Secrets that are not in the environment are fetched from
Google Secret Manager using Application Default Credentials, so the same
code runs locally and on Cloud Run.
"""

import logging
import os

import google.auth
from dotenv import load_dotenv
from google.cloud import secretmanager

load_dotenv()

# Firestore collections
DOCTORS = "doctors"
PATIENTS = "patients"
APPOINTMENTS = "appointments"

# Routes
LOGIN_ROUTE = "/login"
DOCTOR_ROUTE = "/doctor"
PATIENT_ROUTE = "/patient"

LOG_LEVEL = os.getenv("CLINIC_LOG_LEVEL", "INFO").upper()
FEED_REFRESH_SECONDS = int(os.getenv("CLINIC_FEED_REFRESH_SECONDS", "5"))
HTTP_TIMEOUT = float(os.getenv("CLINIC_HTTP_TIMEOUT", "10"))

FIREBASE_KEY_SECRET = "firebase-api-key"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def get_project_id() -> str:
    _, project_id = google.auth.default()
    project_id = project_id or os.getenv("GCP_PROJECT")
    if not project_id:
        raise RuntimeError("GCP project ID not found")
    return project_id


def get_secret(secret_id: str) -> str:
    """Return the latest version of *secret_id* from Secret Manager."""
    sm = secretmanager.SecretManagerServiceClient()
    name = f"projects/{get_project_id()}/secrets/{secret_id}/versions/latest"
    return sm.access_secret_version(name=name).payload.data.decode()


def get_firebase_api_key() -> str:
    return os.getenv("FIREBASE_API_KEY") or get_secret(FIREBASE_KEY_SECRET)
