"""
Error taxonomy shared by every dashboard.

NotFoundError    profile document absent; recovered locally, never shown.
ValidationError  missing or unparseable user input; shown, nothing written.
StorageError     a Firestore call failed; shown with the underlying text.
AuthError        the identity provider refused the request.
"""


class ClinicError(Exception):
    """Base class for errors raised by the clinic package."""


class NotFoundError(ClinicError):
    pass


class ValidationError(ClinicError):
    pass


class StorageError(ClinicError):
    pass


class AuthError(ClinicError):
    pass
