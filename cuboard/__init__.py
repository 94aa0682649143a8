# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""Text input with a GAN Gen2 smart cube."""

from .cube import (
    CornerOrientation, CornerPosition, CubeMove, CubeState, CubeStateRaw,
    EdgeOrientation, EdgePosition, format_moves,
)
from .gan_cipher import DeviceIdentifierError, GanCubeV2Cipher, derive_key_iv
from .gan_protocol import (
    BatteryEvent, DisconnectEvent, GanGen2ProtocolDriver, GyroscopeEvent,
    MessageParseError, MovesEvent, RequestBatteryState, RequestCubeState,
    ResetCubeState, StateEvent,
)
from .keymap import DEFAULT_KEYMAP, CuboardInput, CuboardInputEvent
from .move_buffer import CuboardKey, MoveBuffer, parse_keys
from .orientation import CubeOrientation
from .session import CuboardSession

__version__ = "0.1.0"
