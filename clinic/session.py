"""
Session plumbing: routing, view lifetimes and the sign-in gate.
"""

import functools
import logging
import threading
from typing import Callable, List, MutableMapping

from clinic import config

logger = logging.getLogger(__name__)


class Navigator:
    """
    Route holder backed by ``st.session_state``.

    ``redirect`` only records the new route; ``settle`` (called once at the
    end of a script run) performs the rerun, so a redirect issued inside a
    listener never unwinds the code that registered it.
    """

    def __init__(self, state: MutableMapping, rerun: Callable[[], None]):
        self._state = state
        self._rerun = rerun

    @property
    def path(self) -> str:
        return self._state.get("route", config.LOGIN_ROUTE)

    def redirect(self, path: str) -> None:
        logger.debug("Redirect %s -> %s", self.path, path)
        self._state["route"] = path
        self._state["route_changed"] = True

    def settle(self) -> None:
        if self._state.pop("route_changed", False):
            self._rerun()


class Lifetime:
    """
    Cancellation token for one mounted view.

    Release callables handed to ``own`` run (newest first) on ``close``.
    Callbacks wrapped with ``guard`` become no-ops once the lifetime is
    closed, so late results never reach a torn-down view.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._releases: List[Callable[[], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def own(self, release: Callable[[], None]) -> Callable[[], None]:
        with self._lock:
            if not self._closed:
                self._releases.append(release)
                return release
        release()
        return release

    def guard(self, fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            with self._lock:
                if self._closed:
                    logger.debug("Dropped late delivery to %s", fn.__name__)
                    return None
            return fn(*args, **kwargs)

        return wrapper

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            releases, self._releases = self._releases, []
        for release in reversed(releases):
            release()


class SessionGate:
    """
    Mirrors the provider's sign-in state into a hosting view.

    Signed in: remember the uid and hand it to ``on_signed_in``.
    Signed out: forget the uid and redirect to the login route.
    """

    def __init__(self, auth, navigator: Navigator, lifetime: Lifetime):
        self._auth = auth
        self._navigator = navigator
        self._lifetime = lifetime
        self.user_id = None

    def mount(self, on_signed_in: Callable[[str], None]) -> None:
        @self._lifetime.guard
        def on_change(identity):
            if identity:
                self.user_id = identity.uid
                on_signed_in(identity.uid)
            else:
                self.user_id = None
                self._navigator.redirect(config.LOGIN_ROUTE)

        self._lifetime.own(self._auth.subscribe(on_change))
