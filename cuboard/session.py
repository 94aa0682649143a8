# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Connection object tying the protocol driver to an input session.

The transport hands every notification to ``handle_notification`` in arrival
order; the session owns all mutable state of the connection (cipher, move
counter, move buffer).
"""

from __future__ import annotations
import logging
from typing import Callable, Iterable, Iterator, List, Optional

from .gan_protocol import (
    CubeEvent, GanGen2ProtocolDriver, MessageParseError, RequestBatteryState,
    RequestCubeState, RequestMessage, ResetCubeState,
)
from .cube import CubeStateRaw
from .keymap import CuboardInput, CuboardInputEvent

logger = logging.getLogger(__name__)


class CuboardSession:
    """Decodes notifications of one connection and feeds them to a CuboardInput."""

    def __init__(self, driver: GanGen2ProtocolDriver, cuboard_input: Optional[CuboardInput] = None):
        self.driver = driver
        self.input = cuboard_input or CuboardInput()
        self.accepted_text = ""
        self.disconnected = False
        self._event_callbacks: List[Callable[[CubeEvent], None]] = []

    def add_event_callback(self, callback: Callable[[CubeEvent], None]) -> None:
        """Add callback for decoded cube events (gyroscope, battery ...)."""
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[CubeEvent], None]) -> None:
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def handle_notification(self, data: bytes) -> Optional[CuboardInputEvent]:
        """Process one raw notification. Undecodable frames are logged and dropped."""
        try:
            event = self.driver.decode_notification(data)
        except MessageParseError as e:
            logger.warning("Dropping frame: %s (raw %s)", e, e.data.hex())
            return None

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Error in event callback")

        result = self.input.handle_message(event)
        if result is None:
            return None

        if result.kind == "DISCONNECT":
            self.disconnected = True
        elif result.kind in ("INPUT", "FINISH"):
            self.accepted_text += result.accept
        return result

    def consume(self, notifications: Iterable[bytes]) -> Iterator[CuboardInputEvent]:
        """Handle notifications until the cube announces it is disconnecting."""
        for data in notifications:
            result = self.handle_notification(data)
            if result is None:
                continue
            yield result
            if self.disconnected:
                logger.info("Cube requested disconnect, stopping notification loop")
                return

    def cancel(self) -> CuboardInputEvent:
        return self.input.cancel()

    def finish(self) -> str:
        text = self.input.finish()
        self.accepted_text += text
        return text

    def request_cube_state(self) -> bytes:
        return self.create_request(RequestCubeState())

    def request_battery_state(self) -> bytes:
        return self.create_request(RequestBatteryState())

    def reset_cube_state(self, state: Optional[CubeStateRaw] = None) -> bytes:
        return self.create_request(ResetCubeState(state or CubeStateRaw()))

    def create_request(self, request: RequestMessage) -> bytes:
        """Encrypted 20-byte frame for the transport to write."""
        return self.driver.create_command_message(request)
