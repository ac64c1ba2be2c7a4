# locsync/protocol/location.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
import math
from typing import Dict, Optional, Tuple

from locsync.protocol.constants import LocationConstants

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class FieldSpec:
    name: str
    offset: int
    size: int

# Location "info" record, all fields big-endian.
# Bytes not covered by a field (6 and 26-90) are reserved and always zero.
LOCATION_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec('record_length', 0, 2),
    FieldSpec('command_tag', 2, 3),
    FieldSpec('report_type', 5, 1),
    FieldSpec('feature_flags', 7, 4),
    FieldSpec('latitude', 11, 4),
    FieldSpec('longitude', 15, 4),
    FieldSpec('year', 19, 2),
    FieldSpec('month', 21, 1),
    FieldSpec('day', 22, 1),
    FieldSpec('hour', 23, 1),
    FieldSpec('minute', 24, 1),
    FieldSpec('second', 25, 1),
    FieldSpec('utc_offset', 91, 2),
    FieldSpec('dst_offset', 93, 2),
)

# Fields whose value never depends on the input
CONSTANT_FIELDS: Dict[str, int] = {
    'record_length': int(LocationConstants.RECORD_LENGTH),
    'command_tag': int(LocationConstants.COMMAND_TAG),
    'report_type': int(LocationConstants.REPORT_TZ_DST),
    'feature_flags': int(LocationConstants.FEATURE_FLAGS),
    'dst_offset': int(LocationConstants.DST_OFFSET_NONE),
}


def _to_signed(value: int, bits: int) -> int:
    if value >= 1 << (bits - 1):
        return value - (1 << bits)
    return value


def _localize(when: datetime) -> datetime:
    """Naive datetimes are taken as system local time."""
    if when.tzinfo is None or when.utcoffset() is None:
        return when.astimezone()
    return when


def scale_coordinate(degrees: float) -> int:
    """
    Converts decimal degrees to the camera's 32-bit coordinate field.

    The value is multiplied by 10^7 and truncated toward zero (not rounded).
    Negative results wrap to their two's-complement unsigned form, so
    -33.8688 is sent as 0xEBD00800. Non-finite input encodes as 0.
    """
    if not math.isfinite(degrees):
        return 0
    return int(degrees * LocationConstants.COORDINATE_SCALE) & 0xFFFFFFFF


def encode_utc_offset(when: datetime) -> int:
    """UTC offset of `when` in minutes, wrapped to unsigned 16-bit (-480 -> 0xFE20)."""
    offset = _localize(when).utcoffset() or timedelta(0)
    minutes = int(offset.total_seconds() / 60)
    return minutes & 0xFFFF


@dataclass(frozen=True)
class LocationPayload:
    """
    One location/time report for the camera.

    Holds the wire-level value of every field in LOCATION_FIELDS. Use
    from_location() to build one from coordinates and a timestamp, and
    to_bytes()/from_bytes() to move between the record and its 95-byte form.
    """
    latitude: int
    longitude: int
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    utc_offset: int
    record_length: int = CONSTANT_FIELDS['record_length']
    command_tag: int = CONSTANT_FIELDS['command_tag']
    report_type: int = CONSTANT_FIELDS['report_type']
    feature_flags: int = CONSTANT_FIELDS['feature_flags']
    dst_offset: int = CONSTANT_FIELDS['dst_offset']

    @classmethod
    def from_location(cls, latitude: float, longitude: float, when: datetime) -> 'LocationPayload':
        """
        Args:
            latitude: Decimal degrees, north positive.
            longitude: Decimal degrees, east positive.
            when: Local date-time. Naive values are interpreted as system local time.

        Returns:
            LocationPayload: The report, with calendar fields taken from `when`
            as-is (local time, not converted to UTC).
        """
        when = _localize(when)
        return cls(
            latitude=scale_coordinate(latitude),
            longitude=scale_coordinate(longitude),
            year=when.year & 0xFFFF,
            month=when.month,
            day=when.day,
            hour=when.hour,
            minute=when.minute,
            second=when.second,
            utc_offset=encode_utc_offset(when),
        )

    def to_bytes(self) -> bytes:
        data = bytearray(LocationConstants.PAYLOAD_SIZE)
        for field in LOCATION_FIELDS:
            value = getattr(self, field.name)
            data[field.offset:field.offset + field.size] = value.to_bytes(field.size, 'big')
        return bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'LocationPayload':
        """
        Parses a 95-byte record.

        Raises:
            ValueError: If the length is wrong or a constant field does not
                carry its expected value.
        """
        if len(data) != LocationConstants.PAYLOAD_SIZE:
            raise ValueError(
                f"Location payload must be {int(LocationConstants.PAYLOAD_SIZE)} bytes, got {len(data)}"
            )

        values = {
            field.name: int.from_bytes(data[field.offset:field.offset + field.size], 'big')
            for field in LOCATION_FIELDS
        }

        for name, expected in CONSTANT_FIELDS.items():
            if values[name] != expected:
                raise ValueError(f"Unexpected {name}: 0x{values[name]:X} (expected 0x{expected:X})")

        return cls(**values)

    @property
    def latitude_degrees(self) -> float:
        return _to_signed(self.latitude, 32) / LocationConstants.COORDINATE_SCALE

    @property
    def longitude_degrees(self) -> float:
        return _to_signed(self.longitude, 32) / LocationConstants.COORDINATE_SCALE

    @property
    def utc_offset_minutes(self) -> int:
        return _to_signed(self.utc_offset, 16)

    @property
    def local_time(self) -> datetime:
        # timezone() rejects offsets of 24h or more, which no real record carries
        tz = timezone(timedelta(minutes=self.utc_offset_minutes))
        return datetime(self.year, self.month, self.day,
                        self.hour, self.minute, self.second, tzinfo=tz)


def build_location_payload(latitude: float, longitude: float,
                           when: Optional[datetime] = None) -> bytes:
    """
    Encodes a location report for the camera's location "info" characteristic.

    Args:
        latitude: Decimal degrees.
        longitude: Decimal degrees.
        when: Local date-time to report. Defaults to now, in system local time.

    Returns:
        bytes: The 95-byte record.
    """
    if when is None:
        when = datetime.now().astimezone()

    payload = LocationPayload.from_location(latitude, longitude, when)
    packet = payload.to_bytes()

    logger.debug(
        f"[LOCATION] lat={latitude} lng={longitude} time={payload.local_time.isoformat()} "
        f"-> {len(packet)} bytes"
    )
    logger.debug(f"[LOCATION] Hex: {packet.hex()}")
    return packet
