"""Exception types for vital-log."""


class VitalLogError(Exception):
    """Base class for vital-log errors."""


class RemoteStoreError(VitalLogError):
    """A remote store call failed (network, auth or server error)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SyncError(VitalLogError):
    """A push or pull could not be completed."""

    def __init__(self, message: str, collection: str | None = None):
        super().__init__(message)
        self.collection = collection


class BackupFormatError(VitalLogError):
    """A backup bundle could not be parsed."""


# Raised by the model ``from_dict`` constructors on malformed input; nested
# items of the wrong shape surface as AttributeError.
MALFORMED_DATA_ERRORS = (AttributeError, KeyError, TypeError, ValueError)
