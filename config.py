# Configuration for the camera location sync

from bleak.uuids import normalize_uuid_16

# ==============================================================================
# CONSTANTS (Vendor BLE protocol)
# ==============================================================================

# Control Service
CONTROL_SERVICE_UUID = "8000cc00-cc00-ffff-ffff-ffffffffffff"

# Location Service
# The characteristics are 16-bit IDs on the Bluetooth base UUID.
LOCATION_SERVICE_UUID = "8000dd00-dd00-ffff-ffff-ffffffffffff"
LOCATION_CHAR_NOTIFY_UUID = normalize_uuid_16(0xDD01)
LOCATION_CHAR_INFO_UUID = normalize_uuid_16(0xDD11)    # Receives the 95-byte report
LOCATION_CHAR_FEATURE_UUID = normalize_uuid_16(0xDD21)

# Pairing Service
PAIRING_SERVICE_UUID = "8000ee00-ee00-ffff-ffff-ffffffffffff"
PAIRING_CHAR_UUID = normalize_uuid_16(0xEE01)

# Remote Control Service
REMOTE_CONTROL_SERVICE_UUID = "8000ff00-ff00-ffff-ffff-ffffffffffff"
REMOTE_CONTROL_CHAR_COMMAND_UUID = normalize_uuid_16(0xFF01)
REMOTE_CONTROL_CHAR_NOTIFY_UUID = normalize_uuid_16(0xFF02)

# ==============================================================================
# Device Selection
# ==============================================================================

# Substring of the advertised local name of the target camera.
DEVICE_NAME_FILTER = "ILCE-7C"

# Adapter to scan and connect with, e.g. "hci0". None uses the first adapter.
BLE_ADAPTER = None

# ==============================================================================
# Location
# ==============================================================================

DEFAULT_LATITUDE = 27.986065
DEFAULT_LONGITUDE = 86.922623

# ==============================================================================
# Timing
# ==============================================================================

# Upper bound for discovery. Returns as soon as the camera is seen.
DISCOVERY_TIMEOUT = 10.0  # seconds

CONNECT_TIMEOUT = 20.0  # seconds
