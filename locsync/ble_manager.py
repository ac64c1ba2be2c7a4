import logging
from typing import Dict, List, Optional

from bleak import BleakClient, BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData

from locsync.exceptions import CameraNotFoundError, CharacteristicNotFoundError

logger = logging.getLogger(__name__)


def matches_name(name: Optional[str], name_filter: str) -> bool:
    """Case-sensitive substring match. Devices without a name never match."""
    return bool(name) and name_filter in name


def _adapter_kwargs(adapter: Optional[str]) -> dict:
    # bleak picks the default adapter when none is passed
    return {"adapter": adapter} if adapter else {}


class BLEManager:
    """
    Handles Bluetooth Low Energy (BLE) interactions with the camera.
    """

    @staticmethod
    async def find_camera(name_filter: str, timeout: float = 10.0,
                          adapter: Optional[str] = None) -> BLEDevice:
        """
        Scans until a device whose advertised name contains `name_filter` shows up.

        Resolves on the first matching advertisement; `timeout` is only an
        upper bound.

        Returns:
            BLEDevice: The first matching device.

        Raises:
            CameraNotFoundError: If nothing matched before the timeout.
        """
        logger.info(f"Scanning for camera matching '{name_filter}' (timeout {timeout}s)...")

        def _is_camera(device: BLEDevice, advertisement: AdvertisementData) -> bool:
            # BlueZ only sometimes repeats the local name, fall back to the cached one
            return matches_name(advertisement.local_name or device.name, name_filter)

        device = await BleakScanner.find_device_by_filter(
            _is_camera, timeout=timeout, **_adapter_kwargs(adapter)
        )

        if device is None:
            logger.warning(f"No device matching '{name_filter}' found during BLE scan.")
            raise CameraNotFoundError(
                f"No device advertising a name containing '{name_filter}' within {timeout}s"
            )

        logger.info(f"Found Device by Name: {device.name} ({device.address})")
        return device

    @staticmethod
    def client_for(device: BLEDevice, timeout: float = 20.0,
                   adapter: Optional[str] = None) -> BleakClient:
        """Unconnected client for `device`. Use as `async with`; services are discovered on connect."""
        return BleakClient(device, timeout=timeout, **_adapter_kwargs(adapter))

    @staticmethod
    def get_characteristic(client: BleakClient, char_uuid: str) -> BleakGATTCharacteristic:
        char = client.services.get_characteristic(char_uuid)
        if char is None:
            raise CharacteristicNotFoundError(
                f"Characteristic {char_uuid} not found on {client.address}"
            )

        logger.debug(
            f"Characteristic: {char.uuid} (handle 0x{char.handle:04x}, "
            f"properties: {', '.join(char.properties)})"
        )
        return char

    @staticmethod
    async def write_location(client: BleakClient, char: BleakGATTCharacteristic,
                             payload: bytes) -> None:
        """
        Writes the location report with response (the camera acknowledges it).
        """
        logger.info(f"Sending location payload ({len(payload)} bytes) to {char.uuid}...")
        await client.write_gatt_char(char, payload, response=True)
        logger.info("Location payload sent successfully.")

    @staticmethod
    def list_characteristics(client: BleakClient) -> List[Dict]:
        """
        Logs every service and characteristic of a connected device.

        Returns:
            list: One dict per characteristic with service, uuid, handle and properties.
        """
        found = []
        for service in client.services:
            logger.info(f"Service: {service.uuid} ({service.description})")

            for char in service.characteristics:
                props = ", ".join(char.properties)
                logger.info(f"  Characteristic: {char.uuid} ({char.description})")
                logger.info(f"    Properties: {props}")

                found.append({
                    "service": service.uuid,
                    "uuid": char.uuid,
                    "handle": char.handle,
                    "properties": list(char.properties),
                })

        logger.info(f"Discovery complete. {len(found)} characteristics.")
        return found
