# locsync/location_sync.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import logging
from typing import Dict, List, Optional

import config
from locsync.ble_manager import BLEManager
from locsync.protocol.location import build_location_payload

logger = logging.getLogger(__name__)

class SyncState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    CONNECTING = "connecting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"

@dataclass
class LocationSyncSettings:
    latitude: float = config.DEFAULT_LATITUDE
    longitude: float = config.DEFAULT_LONGITUDE
    name_filter: str = config.DEVICE_NAME_FILTER
    discovery_timeout: float = config.DISCOVERY_TIMEOUT
    connect_timeout: float = config.CONNECT_TIMEOUT
    char_uuid: str = config.LOCATION_CHAR_INFO_UUID
    adapter: Optional[str] = config.BLE_ADAPTER

class LocationSync:
    """
    Sends one location report to the camera.

    discover -> connect -> locate characteristic -> encode -> write.
    Every step is awaited before the next one starts. Nothing is retried:
    the first failure leaves the sync in FAILED and is re-raised.
    """

    def __init__(self, settings: Optional[LocationSyncSettings] = None):
        self.settings = settings or LocationSyncSettings()
        self.state = SyncState.IDLE
        self.device = None

    async def _discover(self):
        self.state = SyncState.DISCOVERING
        self.device = await BLEManager.find_camera(
            self.settings.name_filter,
            timeout=self.settings.discovery_timeout,
            adapter=self.settings.adapter,
        )
        self.state = SyncState.CONNECTING
        return BLEManager.client_for(
            self.device,
            timeout=self.settings.connect_timeout,
            adapter=self.settings.adapter,
        )

    async def run(self, when: Optional[datetime] = None) -> bytes:
        """
        Args:
            when: Local time to report. Defaults to the time of the write.

        Returns:
            bytes: The payload that was written.
        """
        s = self.settings
        try:
            client = await self._discover()
            async with client:
                logger.info(f"BLE Connected to {self.device.address}.")
                char = BLEManager.get_characteristic(client, s.char_uuid)

                payload = build_location_payload(s.latitude, s.longitude, when)

                self.state = SyncState.WRITING
                await BLEManager.write_location(client, char, payload)

            self.state = SyncState.DONE
            logger.info(f"Location ({s.latitude}, {s.longitude}) synced to {self.device.name}.")
            return payload

        except Exception:
            self.state = SyncState.FAILED
            raise

    async def inspect(self) -> List[Dict]:
        """Connects to the camera and lists its characteristics without writing."""
        try:
            client = await self._discover()
            async with client:
                logger.info(f"BLE Connected to {self.device.address}. Discovering services...")
                found = BLEManager.list_characteristics(client)
            self.state = SyncState.DONE
            return found

        except Exception:
            self.state = SyncState.FAILED
            raise
