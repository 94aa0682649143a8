# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
BLE transport for GAN Gen2 cubes.

Finds the cube, derives the cipher from its advertisement, forwards every
notification to a CuboardSession in arrival order and writes the session's
request frames back.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Dict, Optional, Tuple

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData

from .config import Settings
from .gan_cipher import GanCubeV2Cipher
from .gan_protocol import GanGen2ProtocolDriver
from .keymap import CuboardInput, CuboardInputEvent, make_cheatsheet
from .session import CuboardSession

logger = logging.getLogger(__name__)

# GAN Gen2 characteristic UUIDs
REQUEST_CHAR_UUID = "28be4a4a-cd67-11e9-a32f-2a2ae2dbcce4"
RESPONSE_CHAR_UUID = "28be4cb6-cd67-11e9-a32f-2a2ae2dbcce4"

RESCAN_DELAY = 1.0

Discovered = Dict[str, Tuple[BLEDevice, AdvertisementData]]
InputCallback = Callable[[CuboardSession, CuboardInputEvent], None]


def find_cube(discovered: Discovered, prefix: str = "GAN") -> Optional[Tuple[BLEDevice, AdvertisementData]]:
    """First discovered device whose advertised name starts with `prefix`."""
    for device, advertisement in discovered.values():
        name = advertisement.local_name or device.name
        if name and name.startswith(prefix):
            return device, advertisement
    return None


async def discover_cube(settings: Settings) -> Tuple[BLEDevice, AdvertisementData]:
    """Scan until a cube shows up or the configured attempts are used up."""
    for attempt in range(1, settings.scan_attempts + 1):
        logger.info("🔍 Scanning for GAN cubes (%ss, attempt %d/%d)...",
                    settings.scan_timeout, attempt, settings.scan_attempts)
        discovered = await BleakScanner.discover(timeout=settings.scan_timeout, return_adv=True)
        found = find_cube(discovered, settings.device_prefix)
        if found:
            device, _ = found
            logger.info("Found cube %s [%s]", device.name, device.address)
            return found
        await asyncio.sleep(RESCAN_DELAY)
    raise LookupError(f"No device named {settings.device_prefix}* found")


def create_session(advertisement: AdvertisementData, settings: Settings) -> CuboardSession:
    """Session for one connection; fails with DeviceIdentifierError on a bad advertisement."""
    cipher = GanCubeV2Cipher.from_manufacturer_data(advertisement.manufacturer_data)
    cuboard_input = CuboardInput(settings.load_keymap(), settings.cube_orientation())
    return CuboardSession(GanGen2ProtocolDriver(cipher), cuboard_input)


async def run_session(device: BLEDevice, session: CuboardSession,
                      on_input: Optional[InputCallback] = None) -> CuboardSession:
    """Connect and pump notifications into `session` until either side disconnects."""
    notifications: asyncio.Queue = asyncio.Queue()

    def on_disconnect(_client: BleakClient) -> None:
        notifications.put_nowait(None)

    def on_notify(_sender, data: bytearray) -> None:
        notifications.put_nowait(bytes(data))

    logger.info("🔗 Connecting to %s [%s]...", device.name, device.address)
    async with BleakClient(device, disconnected_callback=on_disconnect) as client:
        await client.start_notify(RESPONSE_CHAR_UUID, on_notify)
        await client.write_gatt_char(REQUEST_CHAR_UUID, session.request_cube_state(), response=True)
        logger.info("✅ Connected, waiting for cube state")

        while True:
            data = await notifications.get()
            if data is None:
                logger.info("Link to cube lost")
                break
            result = session.handle_notification(data)
            if result is not None and on_input is not None:
                on_input(session, result)
            if session.disconnected:
                logger.info("Cube closed the connection")
                break

        if client.is_connected:
            await client.stop_notify(RESPONSE_CHAR_UUID)

    return session


def _print_input(session: CuboardSession, result: CuboardInputEvent) -> None:
    if result.kind == "FINISH":
        print(f"\r{result.accept}", end="", flush=True)
    elif result.kind in ("INPUT", "CANCEL"):
        print(f"\r{session.input.complete_part()}[{session.input.remain_part()}]", end="", flush=True)


async def main(settings: Settings) -> None:
    device, advertisement = await discover_cube(settings)
    session = create_session(advertisement, settings)
    print(make_cheatsheet(session.input.keymap))
    await run_session(device, session, _print_input)


def run() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level,
                        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                        datefmt="%H:%M:%S")
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("🛑 Stopped by user")


if __name__ == "__main__":
    run()
