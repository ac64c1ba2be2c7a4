# locsync/exceptions.py

class LocationSyncError(Exception):
    """Base class for failures that abort a location sync."""


class CameraNotFoundError(LocationSyncError):
    """No advertising device matched the name filter before the timeout."""


class CharacteristicNotFoundError(LocationSyncError):
    """The connected device does not expose the location characteristic."""
