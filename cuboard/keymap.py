# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Keymap based text input on top of the move buffer.

A keymap is a 2 x 12 x 4 table of strings indexed by
[is_shifted][key.main][key.num].
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cube import CubeMove, format_moves
from .gan_protocol import CubeEvent, DisconnectEvent, MovesEvent, StateEvent
from .move_buffer import CuboardKey, MoveBuffer
from .orientation import IDENTITY, CubeOrientation

logger = logging.getLogger(__name__)

COUNTER_MODULUS = 256
MAX_NEW_MOVES = 7
SUBMIT = "\n"

Keymap = Sequence[Sequence[Sequence[str]]]

DEFAULT_KEYMAP = [
    [
        ["d", "u", "c", "k"],   # U
        ["(", "[", "{", "<"],   # U'
        ["g", "a", "s", "p"],   # R
        [" ", "0", "z", "q"],   # R'
        ["f", "l", "o", "w"],   # F
        [".", ":", "'", "!"],   # F'
        ["j", "i", "n", "x"],   # D
        ["+", "-", "*", "/"],   # D'
        ["m", "y", "t", "h"],   # L
        ["1", "2", "3", "4"],   # L'
        ["v", "e", "r", "b"],   # B
        ["@", "$", "&", "`"],   # B'
    ],
    [
        ["D", "U", "C", "K"],
        [")", "]", "}", ">"],
        ["G", "A", "S", "P"],
        ["\n", "9", "Z", "Q"],
        ["F", "L", "O", "W"],
        [",", ";", "\"", "?"],
        ["J", "I", "N", "X"],
        ["=", "|", "^", "\\"],
        ["M", "Y", "T", "H"],
        ["5", "6", "7", "8"],
        ["V", "E", "R", "B"],
        ["#", "%", "~", "_"],
    ],
]


def validate_keymap(keymap) -> List[List[List[str]]]:
    """Return `keymap` as nested lists, raising ValueError unless it is 2 x 12 x 4 strings."""
    if not isinstance(keymap, (list, tuple)) or len(keymap) != 2:
        raise ValueError("keymap must have 2 shift states")
    result = []
    for shift, rows in enumerate(keymap):
        if not isinstance(rows, (list, tuple)) or len(rows) != len(CubeMove):
            raise ValueError(f"keymap shift state {shift} must have {len(CubeMove)} rows")
        table = []
        for move, row in zip(CubeMove, rows):
            if not isinstance(row, (list, tuple)) or len(row) != 4:
                raise ValueError(f"keymap row {move} (shift state {shift}) must have 4 entries")
            if not all(isinstance(entry, str) for entry in row):
                raise ValueError(f"keymap row {move} (shift state {shift}) must contain strings only")
            table.append(list(row))
        result.append(table)
    return result


def load_keymap(path: str) -> List[List[List[str]]]:
    """Load a keymap from a JSON file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"keymap {path} is not valid JSON: {e}") from e
    return validate_keymap(data)


def make_cheatsheet(keymap: Keymap) -> str:
    """Plain-text summary: one line per face, listing the four slots of each move variant."""
    def show(row: Sequence[str]) -> str:
        return ''.join(entry.replace("\n", "↵").replace(" ", "⌴") for entry in row)

    headers = ["double cw", "single cw", "single ccw", "double ccw"]
    lines = ["face | " + " | ".join(headers)]
    for face in (CubeMove.U, CubeMove.D, CubeMove.F, CubeMove.B, CubeMove.L, CubeMove.R):
        rows = [keymap[1][face], keymap[0][face], keymap[0][face.rev()], keymap[1][face.rev()]]
        cells = [show(row).ljust(len(header)) for row, header in zip(rows, headers)]
        lines.append(f"{str(face):<4} | " + " | ".join(cells))
    return "\n".join(lines)


@dataclass
class CuboardInputEvent:
    """What one cube event did to the input session."""
    kind: str  # UNINIT, INIT, INPUT, FINISH, CANCEL, DISCONNECT
    accept: str = ""
    skip: int = 0


def count_new_moves(previous: int, current: int) -> int:
    """Number of moves between two wrapping 8-bit counters, at most 7."""
    delta = (current - previous) % COUNTER_MODULUS
    diff = min(delta, COUNTER_MODULUS - delta)
    if diff > MAX_NEW_MOVES:
        logger.warning("unsynchronized cube movement: %d -> %d", previous, current)
        diff = MAX_NEW_MOVES
    return diff


class CuboardInput:
    """
    Text input session for one connection: syncs the move counter, replays
    new moves into a MoveBuffer and maps recognised keys to text.
    """

    def __init__(self, keymap: Keymap = DEFAULT_KEYMAP,
                 orientation: CubeOrientation = IDENTITY):
        self.keymap = validate_keymap(keymap)
        self.orientation = orientation
        self.buffer = MoveBuffer()
        self.count: Optional[int] = None

    def key_text(self, key: CuboardKey) -> str:
        return self.keymap[int(key.is_shifted)][key.main][key.num]

    def complete_part(self) -> str:
        """Text of the recognised keys."""
        return ''.join(self.key_text(key) for key, _ in self.buffer.keys)

    buffered_text = complete_part

    def remain_part(self) -> str:
        """Pending moves that do not form a key yet."""
        return format_moves(self.buffer.remains())

    def input_move(self, move: CubeMove) -> bool:
        return self.buffer.input(self.orientation.transform(move))

    def finish(self) -> str:
        return ''.join(self.key_text(key) for key in self.buffer.finish())

    def cancel(self) -> CuboardInputEvent:
        self.buffer.cancel()
        return CuboardInputEvent("CANCEL")

    def handle_message(self, event: CubeEvent) -> Optional[CuboardInputEvent]:
        if isinstance(event, DisconnectEvent):
            return CuboardInputEvent("DISCONNECT")

        if self.count is None:
            if isinstance(event, StateEvent):
                self.count = event.count
                return CuboardInputEvent("INIT")
            return CuboardInputEvent("UNINIT")

        if not isinstance(event, MovesEvent):
            return None

        diff = count_new_moves(self.count, event.count)
        self.count = event.count

        skip = 0
        for move in reversed(event.moves[:diff]):
            if move is None:
                logger.warning("unknown cube movement")
                skip += 1
                continue
            self.input_move(move)

        # The submit key flushes everything recognised so far as a finished line
        if SUBMIT in self.buffered_text():
            return CuboardInputEvent("FINISH", accept=self.finish(), skip=skip)
        return CuboardInputEvent("INPUT", skip=skip)
