# tests/test_ble_manager.py
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from locsync.ble_manager import BLEManager, matches_name
from locsync.exceptions import CameraNotFoundError, CharacteristicNotFoundError

INFO_UUID = "0000dd11-0000-1000-8000-00805f9b34fb"


def make_device(address, name):
    device = MagicMock()
    device.address = address
    device.name = name
    return device


def make_advertisement(local_name):
    advertisement = MagicMock()
    advertisement.local_name = local_name
    return advertisement


def scanner_seeing(*sightings):
    """find_device_by_filter stand-in that replays (device, advertisement) pairs through the filter."""
    async def fake_find(filterfunc, timeout=10.0, **kwargs):
        for device, advertisement in sightings:
            if filterfunc(device, advertisement):
                return device
        return None
    return AsyncMock(side_effect=fake_find)


def make_char(uuid=INFO_UUID, handle=0x2A, properties=("write",)):
    char = MagicMock()
    char.uuid = uuid
    char.handle = handle
    char.description = "Vendor specific"
    char.properties = list(properties)
    return char


@pytest.mark.parametrize("name,expected", [
    ("ILCE-7C", True),
    ("ILCE-7CM2", True),
    ("Sony ILCE-7C", True),
    ("ilce-7c", False),
    ("ILCE-7M3", False),
    ("", False),
    (None, False),
])
def test_matches_name(name, expected):
    assert matches_name(name, "ILCE-7C") is expected


@pytest.mark.asyncio
async def test_find_camera_returns_first_match():
    phone = make_device("AA:AA:AA:AA:AA:AA", "Pixel 7")
    camera = make_device("BB:BB:BB:BB:BB:BB", "ILCE-7CM2")
    second = make_device("CC:CC:CC:CC:CC:CC", "ILCE-7C")

    scanner = scanner_seeing(
        (phone, make_advertisement("Pixel 7")),
        (camera, make_advertisement("ILCE-7CM2")),
        (second, make_advertisement("ILCE-7C")),
    )
    with patch("locsync.ble_manager.BleakScanner.find_device_by_filter", scanner):
        device = await BLEManager.find_camera("ILCE-7C", timeout=2.0)

    assert device is camera
    assert scanner.await_args.kwargs["timeout"] == 2.0
    assert "adapter" not in scanner.await_args.kwargs


@pytest.mark.asyncio
async def test_find_camera_falls_back_to_cached_name():
    camera = make_device("BB:BB:BB:BB:BB:BB", "ILCE-7C")
    scanner = scanner_seeing((camera, make_advertisement(None)))

    with patch("locsync.ble_manager.BleakScanner.find_device_by_filter", scanner):
        device = await BLEManager.find_camera("ILCE-7C")

    assert device is camera


@pytest.mark.asyncio
async def test_find_camera_passes_adapter():
    camera = make_device("BB:BB:BB:BB:BB:BB", "ILCE-7C")
    scanner = scanner_seeing((camera, make_advertisement("ILCE-7C")))

    with patch("locsync.ble_manager.BleakScanner.find_device_by_filter", scanner):
        await BLEManager.find_camera("ILCE-7C", adapter="hci1")

    assert scanner.await_args.kwargs["adapter"] == "hci1"


@pytest.mark.asyncio
async def test_find_camera_raises_when_nothing_matches():
    phone = make_device("AA:AA:AA:AA:AA:AA", "Pixel 7")
    scanner = scanner_seeing((phone, make_advertisement("Pixel 7")))

    with patch("locsync.ble_manager.BleakScanner.find_device_by_filter", scanner):
        with pytest.raises(CameraNotFoundError, match="ILCE-7C"):
            await BLEManager.find_camera("ILCE-7C", timeout=0.5)


def test_client_for_builds_bleak_client():
    camera = make_device("BB:BB:BB:BB:BB:BB", "ILCE-7C")

    with patch("locsync.ble_manager.BleakClient") as client_cls:
        client = BLEManager.client_for(camera, timeout=5.0, adapter="hci0")

    client_cls.assert_called_once_with(camera, timeout=5.0, adapter="hci0")
    assert client is client_cls.return_value


def test_get_characteristic_found():
    char = make_char()
    client = MagicMock()
    client.services.get_characteristic.return_value = char

    assert BLEManager.get_characteristic(client, INFO_UUID) is char
    client.services.get_characteristic.assert_called_once_with(INFO_UUID)


def test_get_characteristic_missing():
    client = MagicMock()
    client.address = "BB:BB:BB:BB:BB:BB"
    client.services.get_characteristic.return_value = None

    with pytest.raises(CharacteristicNotFoundError, match=INFO_UUID):
        BLEManager.get_characteristic(client, INFO_UUID)


@pytest.mark.asyncio
async def test_write_location_uses_write_with_response():
    char = make_char()
    client = MagicMock()
    client.write_gatt_char = AsyncMock()
    payload = bytes(95)

    await BLEManager.write_location(client, char, payload)

    client.write_gatt_char.assert_awaited_once_with(char, payload, response=True)


def test_list_characteristics():
    info = make_char(INFO_UUID, 0x2A, ("write",))
    notify = make_char("0000dd01-0000-1000-8000-00805f9b34fb", 0x2C, ("notify",))

    service = MagicMock()
    service.uuid = "8000dd00-dd00-ffff-ffff-ffffffffffff"
    service.description = "Unknown"
    service.characteristics = [info, notify]

    client = MagicMock()
    client.services = [service]

    found = BLEManager.list_characteristics(client)

    assert found == [
        {"service": service.uuid, "uuid": INFO_UUID, "handle": 0x2A, "properties": ["write"]},
        {"service": service.uuid, "uuid": notify.uuid, "handle": 0x2C, "properties": ["notify"]},
    ]
