import argparse
import asyncio
import logging
import sys

from bleak.exc import BleakError

import config
from locsync.exceptions import LocationSyncError
from locsync.location_sync import LocationSync, LocationSyncSettings
from locsync.protocol.location import LocationPayload, build_location_payload

logger = logging.getLogger("LocationSync")


def setup_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send GPS location and time to the camera over BLE")
    parser.add_argument("--lat", type=float, default=config.DEFAULT_LATITUDE, help="Latitude in decimal degrees")
    parser.add_argument("--lng", type=float, default=config.DEFAULT_LONGITUDE, help="Longitude in decimal degrees")
    parser.add_argument("--name", default=config.DEVICE_NAME_FILTER, help="Substring of the camera's advertised name")
    parser.add_argument("--timeout", type=float, default=config.DISCOVERY_TIMEOUT, help="Discovery timeout (seconds)")
    parser.add_argument("--adapter", default=config.BLE_ADAPTER, help="Bluetooth adapter, e.g. hci0")
    parser.add_argument("--list-characteristics", action="store_true", help="List the camera's characteristics and exit")
    parser.add_argument("--dry-run", action="store_true", help="Print the payload without using Bluetooth")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.dry_run:
        packet = build_location_payload(args.lat, args.lng)
        payload = LocationPayload.from_bytes(packet)
        logger.info(f"Local time: {payload.local_time.isoformat()} (UTC offset {payload.utc_offset_minutes} min)")
        print(packet.hex())
        return 0

    settings = LocationSyncSettings(
        latitude=args.lat,
        longitude=args.lng,
        name_filter=args.name,
        discovery_timeout=args.timeout,
        adapter=args.adapter,
    )
    sync = LocationSync(settings)

    try:
        if args.list_characteristics:
            asyncio.run(sync.inspect())
        else:
            asyncio.run(sync.run())
    except LocationSyncError as e:
        logger.error(f"❌ {e}")
        return 1
    except BleakError as e:
        logger.error(f"❌ BLE Error: {e}")
        return 1
    except asyncio.TimeoutError:
        logger.error("❌ BLE operation timed out.")
        return 1

    logger.info("✅ Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
