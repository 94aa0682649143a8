# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
GAN Gen2 Protocol Driver
Decodes 20-byte notification frames into typed cube events and builds the
encrypted request frames sent back to the cube.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .bitstream import ProtocolMessageView, ProtocolMessageWriter
from .cube import CubeMove, CubeState, CubeStateRaw, InvalidCubeState
from .gan_cipher import GanCubeV2Cipher

logger = logging.getLogger(__name__)

FRAME_LENGTH = 20
MOVE_SLOTS = 7

# 4-bit type tag at the start of every decrypted notification
GYROSCOPE = 0b0001
CUBE_MOVES = 0b0010
CUBE_STATE = 0b0100
BATTERY_STATE = 0b1001
DISCONNECT = 0b1101

# 8-bit opcode at the start of every request
REQUEST_CUBE_STATE = 0x04
REQUEST_BATTERY_STATE = 0x09
RESET_CUBE_STATE = 0x0A

GYROSCOPE_TRAILER = 0b1010

Quaternion = Tuple[float, float, float, float]
Vector3 = Tuple[float, float, float]


class MessageParseError(ValueError):
    """A frame that cannot be decoded; `data` holds the offending bytes."""

    def __init__(self, message: str, data: bytes):
        super().__init__(message)
        self.data = bytes(data)


class BadMessageLength(MessageParseError):
    def __init__(self, data: bytes):
        super().__init__(f"bad message length: {len(data)}", data)
        self.length = len(data)


class UnrecognizedMessage(MessageParseError):
    def __init__(self, data: bytes, message_type: int):
        super().__init__(f"unrecognized message type 0x{message_type:X}: {bytes(data).hex()}", data)
        self.message_type = message_type


class InvalidStateMessage(MessageParseError):
    def __init__(self, data: bytes, reason: str):
        super().__init__(f"invalid cube state: {reason}: {bytes(data).hex()}", data)


# ---------------- Events ----------------

@dataclass
class CubeEvent:
    """Base class for all cube events."""
    timestamp: float
    event_type: str


@dataclass
class GyroscopeEvent(CubeEvent):
    """Two consecutive orientation samples: unit quaternion plus angular-rate vector each."""
    q1: Quaternion
    q1p: Vector3
    q2: Quaternion
    q2p: Vector3

    def __init__(self, q1: Quaternion, q1p: Vector3, q2: Quaternion, q2p: Vector3,
                 timestamp: Optional[float] = None):
        super().__init__(timestamp or time.time(), "GYROSCOPE")
        self.q1 = q1
        self.q1p = q1p
        self.q2 = q2
        self.q2p = q2p


@dataclass
class MovesEvent(CubeEvent):
    """The last seven moves, most recent first, with the wrapping 8-bit move counter."""
    count: int
    moves: List[Optional[CubeMove]]  # None for unknown move codes
    times: List[int]  # milliseconds

    def __init__(self, count: int, moves: List[Optional[CubeMove]], times: List[int],
                 timestamp: Optional[float] = None):
        super().__init__(timestamp or time.time(), "MOVES")
        self.count = count
        self.moves = moves
        self.times = times


@dataclass
class StateEvent(CubeEvent):
    """Full piece state snapshot."""
    count: int
    raw: CubeStateRaw
    state: CubeState

    def __init__(self, count: int, raw: CubeStateRaw, state: CubeState,
                 timestamp: Optional[float] = None):
        super().__init__(timestamp or time.time(), "STATE")
        self.count = count
        self.raw = raw
        self.state = state


@dataclass
class BatteryEvent(CubeEvent):
    """Battery level event."""
    charging: bool
    percentage: int

    def __init__(self, charging: bool, percentage: int, timestamp: Optional[float] = None):
        super().__init__(timestamp or time.time(), "BATTERY")
        self.charging = charging
        self.percentage = percentage


@dataclass
class DisconnectEvent(CubeEvent):
    """The cube is closing the link on purpose."""

    def __init__(self, timestamp: Optional[float] = None):
        super().__init__(timestamp or time.time(), "DISCONNECT")


# ---------------- Requests ----------------

@dataclass(frozen=True)
class RequestCubeState:
    pass


@dataclass(frozen=True)
class RequestBatteryState:
    pass


@dataclass(frozen=True)
class ResetCubeState:
    """Overwrite the cube's notion of its state; raw arrays are validated on construction."""
    state: CubeState = field(default_factory=CubeState.solved)

    def __post_init__(self):
        if isinstance(self.state, CubeStateRaw):
            object.__setattr__(self, "state", CubeState.from_raw(self.state))


RequestMessage = Union[RequestCubeState, RequestBatteryState, ResetCubeState]


# ---------------- Decoding ----------------

def _from_signed(value: int, bits: int) -> float:
    """Sign-magnitude fixed point: top bit is the sign, the rest scaled by 2**(bits-1)."""
    magnitude = 1 << (bits - 1)
    sign = -1 if value & magnitude else 1
    return sign * (value & (magnitude - 1)) / magnitude


def _decode_gyroscope(view: ProtocolMessageView) -> GyroscopeEvent:
    def sample() -> Tuple[Quaternion, Vector3]:
        q = tuple(_from_signed(view.extract(16), 16) for _ in range(4))
        qp = tuple(_from_signed(view.extract(4), 4) for _ in range(3))
        return q, qp

    q1, q1p = sample()
    q2, q2p = sample()

    remains = view.extract(4)
    if remains != GYROSCOPE_TRAILER:
        logger.warning("bad remains data, possibly broken: %X", remains)

    return GyroscopeEvent(q1=q1, q1p=q1p, q2=q2, q2p=q2p)


def _decode_cube_moves(view: ProtocolMessageView) -> MovesEvent:
    count = view.extract(8)
    moves = [CubeMove.from_code(view.extract(5)) for _ in range(MOVE_SLOTS)]
    times = [view.extract(16) for _ in range(MOVE_SLOTS)]

    remains = view.extract(1)
    if remains != 0:
        logger.warning("bad remains data, possibly broken: %X", remains)

    return MovesEvent(count=count, moves=moves, times=times)


def _missing_value(values: List[int], size: int) -> Optional[int]:
    missing = [v for v in range(size) if v not in values]
    return missing[0] if len(missing) == 1 else None


def _decode_cube_state(view: ProtocolMessageView, clear: bytes) -> StateEvent:
    count = view.extract(8)
    raw = CubeStateRaw()

    # 7 of 8 corners and 11 of 12 edges are sent; the last one is implied
    cp = [view.extract(3) for _ in range(7)]
    co = [view.extract(2) for _ in range(7)]
    ep = [view.extract(4) for _ in range(11)]
    eo = [view.extract(1) for _ in range(11)]

    last_corner = _missing_value(cp, 8)
    if last_corner is None:
        raise InvalidStateMessage(clear, f"corner positions {cp} are not distinct")
    last_edge = _missing_value(ep, 12)
    if last_edge is None:
        raise InvalidStateMessage(clear, f"edge positions {ep} are not a 11-subset of 0..11")

    raw.corners_position = cp + [last_corner]
    raw.corners_orientation = co + [(3 - sum(co) % 3) % 3]
    raw.edges_position = ep + [last_edge]
    raw.edges_orientation = eo + [(2 - sum(eo) % 2) % 2]

    view.skip(10)  # unknown
    remains = clear[14:]
    if any(remains):
        logger.warning("bad remains data, possibly broken: %s", remains.hex())

    try:
        state = CubeState.from_raw(raw)
    except InvalidCubeState as e:
        raise InvalidStateMessage(clear, str(e)) from e

    return StateEvent(count=count, raw=raw, state=state)


def _decode_battery_state(view: ProtocolMessageView, clear: bytes) -> BatteryEvent:
    charging = view.extract(4) != 0
    percentage = view.extract(8)
    remains = clear[2:]
    if any(remains):
        logger.warning("bad remains data, possibly broken: %s", remains.hex())
    return BatteryEvent(charging=charging, percentage=percentage)


def decode_event(clear: bytes) -> CubeEvent:
    """Decode an already-decrypted 20-byte frame."""
    if len(clear) != FRAME_LENGTH:
        raise BadMessageLength(clear)
    clear = bytes(clear)

    view = ProtocolMessageView(clear)
    message_type = view.extract(4)

    if message_type == GYROSCOPE:
        return _decode_gyroscope(view)
    elif message_type == CUBE_MOVES:
        return _decode_cube_moves(view)
    elif message_type == CUBE_STATE:
        return _decode_cube_state(view, clear)
    elif message_type == BATTERY_STATE:
        return _decode_battery_state(view, clear)
    elif message_type == DISCONNECT:
        return DisconnectEvent()

    raise UnrecognizedMessage(clear, message_type)


# ---------------- Encoding ----------------

def pack_request(request: RequestMessage) -> bytes:
    """Plain (unencrypted) 20-byte request frame."""
    writer = ProtocolMessageWriter(FRAME_LENGTH)

    if isinstance(request, RequestCubeState):
        writer.assign(8, REQUEST_CUBE_STATE)
    elif isinstance(request, RequestBatteryState):
        writer.assign(8, REQUEST_BATTERY_STATE)
    elif isinstance(request, ResetCubeState):
        state = request.state.to_raw()
        writer.assign(8, RESET_CUBE_STATE)
        # Outbound state is sent in full, no implied last piece
        for value in state.corners_position:
            writer.assign(3, value)
        for value in state.corners_orientation:
            writer.assign(2, value)
        for value in state.edges_position:
            writer.assign(4, value)
        for value in state.edges_orientation:
            writer.assign(1, value)
    else:
        raise TypeError(f"Unsupported request: {request!r}")

    return writer.to_bytes()


class GanGen2ProtocolDriver:
    """
    Driver implementation for the GAN Gen2 protocol. Owns the connection's
    cipher; decodes notifications and creates command messages.
    """

    def __init__(self, cipher: GanCubeV2Cipher):
        self.cipher = cipher

    def decode_notification(self, data: bytes) -> CubeEvent:
        if len(data) != FRAME_LENGTH:
            raise BadMessageLength(data)
        return decode_event(self.cipher.decrypt(bytes(data)))

    def create_command_message(self, request: RequestMessage) -> bytes:
        return self.cipher.encrypt(pack_request(request))
