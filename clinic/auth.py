"""
Firebase Authentication over its REST API, plus the Streamlit login pane.

The provider is the only place the signed-in identity lives; dashboards
learn about it through ``subscribe`` the same way a browser app listens
for auth-state changes.
"""

import logging
from typing import Callable, List, Optional

import requests
import streamlit as st
from pydantic import BaseModel

from clinic import config
from clinic.errors import AuthError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT = "https://identitytoolkit.googleapis.com/v1/accounts:{action}"

Listener = Callable[[Optional["Identity"]], None]


class Identity(BaseModel):
    uid: str
    email: str = ""
    id_token: str = ""
    refresh_token: str = ""


class FirebaseAuth:
    def __init__(self, api_key: str, session: Optional[requests.Session] = None,
                 timeout: float = config.HTTP_TIMEOUT):
        self._api_key = api_key
        self._http = session or requests.Session()
        self._timeout = timeout
        self._listeners: List[Listener] = []
        self.current: Optional[Identity] = None

    # ---- listeners ---------------------------------------------------
    def subscribe(self, on_change: Listener) -> Callable[[], None]:
        """
        Register *on_change* and call it right away with the current identity.

        Returns a callable that removes the listener; calling it twice is
        harmless.
        """
        self._listeners.append(on_change)
        on_change(self.current)

        def unsubscribe():
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def _set_current(self, identity: Optional[Identity]) -> None:
        self.current = identity
        for listener in list(self._listeners):
            listener(identity)

    # ---- provider calls ----------------------------------------------
    def _call(self, action: str, payload: dict) -> dict:
        url = IDENTITY_TOOLKIT.format(action=action)
        try:
            resp = self._http.post(url, params={"key": self._api_key},
                                   json=payload, timeout=self._timeout)
        except requests.RequestException as err:
            raise AuthError(f"Authentication service unreachable: {err}") from err
        if not resp.ok:
            try:
                message = resp.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                message = f"HTTP {resp.status_code}"
            logger.info("accounts:%s rejected: %s", action, message)
            raise AuthError(message)
        return resp.json()

    def _credentials(self, action: str, email: str, password: str) -> Identity:
        data = self._call(action, {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        identity = Identity(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data.get("idToken", ""),
            refresh_token=data.get("refreshToken", ""),
        )
        logger.info("Signed in %s", identity.uid)
        self._set_current(identity)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        return self._credentials("signInWithPassword", email, password)

    def sign_up(self, email: str, password: str) -> Identity:
        return self._credentials("signUp", email, password)

    def sign_out(self) -> None:
        if self.current is not None:
            logger.info("Signed out %s", self.current.uid)
        self._set_current(None)


ROLES = {"Doctor": config.DOCTOR_ROUTE, "Patient": config.PATIENT_ROUTE}


def login_pane(auth: FirebaseAuth, navigator) -> None:
    """E-mail / password form; a successful sign-in opens the chosen dashboard."""
    st.title("🩺  Clinic Login")
    email = st.text_input("Email").strip().lower()
    password = st.text_input("Password", type="password")
    role = st.radio("I am a", list(ROLES), horizontal=True)

    col_in, col_up = st.columns(2)
    action = None
    if col_in.button("Sign in", width="stretch"):
        action = auth.sign_in
    if col_up.button("Create account", width="stretch"):
        action = auth.sign_up
    if action is None:
        return
    if not email or not password:
        st.error("Please enter your email and password.")
        return
    try:
        action(email, password)
    except AuthError as e:
        st.error(str(e))
        return
    navigator.redirect(ROLES[role])
