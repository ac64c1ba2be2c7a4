# locsync/protocol/constants.py
from enum import IntEnum

class LocationConstants(IntEnum):
    PAYLOAD_SIZE = 95

    # Header
    RECORD_LENGTH = 0x005D    # Length tag (payload size minus the tag itself)
    COMMAND_TAG = 0x0802FC    # Type/command tag (3 bytes)

    # Report types
    REPORT_TZ_DST = 0x03      # With timezone offset and DST

    FEATURE_FLAGS = 0x00101010

    # Degrees -> wire units
    COORDINATE_SCALE = 10_000_000

    # DST offset is not supported by this report
    DST_OFFSET_NONE = 0x0000
