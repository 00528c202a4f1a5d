"""Custom exception classes."""


class RegistrationError(Exception):
    """Base class for registration pipeline failures."""
    pass


class InvalidFormatError(RegistrationError):
    """Raised when a scanned payload is not a JSON object."""
    pass


class MissingRequiredFieldError(RegistrationError):
    """Raised when manual entry lacks name or email."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class DuplicateRecordError(RegistrationError):
    """Raised when an identical record is already registered."""
    pass


class NothingToExportError(RegistrationError):
    """Raised when exporting an empty entry list."""
    pass


class PersistenceReadError(RegistrationError):
    """Raised when the stored entry snapshot cannot be read."""
    pass


class DeviceUnavailableError(RegistrationError):
    """Raised when no camera frame can be read."""
    pass
