"""Wire format for the camera's location characteristic."""

from .constants import LocationConstants
from .location import LocationPayload, build_location_payload

__all__ = [
    'LocationConstants',
    'LocationPayload',
    'build_location_payload',
]
