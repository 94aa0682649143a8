# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Move buffer turning the cube's move reports into "keys".

A key is two moves ``a b`` (unshifted) or three moves ``a a b`` (shifted):
``b`` selects the key row and the face of ``a`` selects one of the four faces
adjacent to ``b``.

The cube re-reports its last seven moves on every notification, and moves on
one axis done close together can arrive in either order, so ``MoveBuffer``
keeps its moves in a canonical form: inside a run of mutually commuting moves,
turns of the same face are kept together, and opposite turns cancel.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .cube import CubeMove

logger = logging.getLogger(__name__)

_U, _R, _F, _D, _L, _B = CubeMove.U, CubeMove.R, CubeMove.F, CubeMove.D, CubeMove.L, CubeMove.B

# Adjacent faces of each face, in the order that numbers a key's slot
ADJACENT_FACES = {
    _U: (_L, _B, _R, _F),
    _R: (_D, _F, _U, _B),
    _F: (_U, _R, _D, _L),
    _D: (_B, _L, _F, _R),
    _L: (_F, _D, _B, _U),
    _B: (_R, _U, _L, _D),
}


class MoveBufferError(RuntimeError):
    """Internal bookkeeping of the buffer is inconsistent."""


@dataclass(frozen=True)
class CuboardKey:
    main: CubeMove
    num: int  # 0..4
    is_shifted: bool

    def __str__(self) -> str:
        return f"{'^' if self.is_shifted else ''}{self.main}.{self.num}"


KeySpan = Tuple[CuboardKey, range]


def parse_keys(moves: Sequence[CubeMove], start: int = 0) -> List[KeySpan]:
    """Greedily parse keys from moves[start:], stopping at the first position that is not a key."""
    keys: List[KeySpan] = []
    while True:
        head = moves[start:start + 3]
        if len(head) == 3 and head[0] == head[1] and head[0] != head[2]:
            adjacent, main, is_shifted = head[0].face(), head[2], True
        elif len(head) >= 2 and head[0] != head[1]:
            adjacent, main, is_shifted = head[0].face(), head[1], False
        else:
            return keys

        order = ADJACENT_FACES[main.face()]
        if adjacent not in order:
            return keys

        end = start + (3 if is_shifted else 2)
        keys.append((CuboardKey(main=main, num=order.index(adjacent), is_shifted=is_shifted), range(start, end)))
        start = end


class MoveBuffer:
    """Pending moves plus the keys recognised from a prefix of them."""

    def __init__(self):
        self._moves: List[CubeMove] = []
        self._keys: List[KeySpan] = []

    @property
    def moves(self) -> List[CubeMove]:
        return list(self._moves)

    @property
    def keys(self) -> List[KeySpan]:
        return list(self._keys)

    def _chunk_end(self) -> int:
        return self._keys[-1][1].stop if self._keys else 0

    def remains(self) -> List[CubeMove]:
        """Moves not yet consumed by a key."""
        return self._moves[self._chunk_end():]

    def is_completed(self) -> bool:
        return self._chunk_end() == len(self._moves)

    def cancel(self) -> None:
        self._moves.clear()
        self._keys.clear()

    def finish(self) -> List[CuboardKey]:
        """Take the recognised keys and drop the moves they consumed; the remainder stays pending."""
        chunk_end = self._chunk_end()
        keys = [key for key, _ in self._keys]
        self._keys.clear()
        del self._moves[:chunk_end]
        return keys

    def input(self, move: CubeMove) -> bool:
        """Add one move. Returns True when keys were added or invalidated."""
        # Moves at the end of the buffer that commute with the new one, newest first
        tail: List[CubeMove] = []
        for previous in reversed(self._moves):
            if not previous.commute(move):
                break
            tail.append(previous)

        same_face = [i for i, previous in enumerate(tail) if previous.face() == move.face()]
        changed = False

        if not same_face or (same_face[0] == 0 and tail[0] == move):
            self._moves.append(move)
        else:
            length = len(self._moves)
            start = length - 1 - same_face[-1]
            end = length - same_face[0]

            # Pull the same-face span to the end, then apply the new move to it
            span = self._moves[start:end]
            del self._moves[start:end]
            if span[0] == move:
                span.append(move)
            else:
                span.pop()
            self._moves.extend(span)

            broken = 0
            for _, covered in reversed(self._keys):
                if covered.stop <= start:
                    break
                broken += 1
            if broken:
                logger.debug("Move %s invalidated %d key(s)", move, broken)
                del self._keys[len(self._keys) - broken:]
                changed = True

        new_keys = parse_keys(self._moves, self._chunk_end())
        if new_keys:
            self._keys.extend(new_keys)
            changed = True

        self._check_invariants()
        return changed

    def _check_invariants(self) -> None:
        position = 0
        for key, covered in self._keys:
            if covered.start != position or covered.stop <= covered.start:
                raise MoveBufferError(f"key {key} covers {covered}, expected to start at {position}")
            position = covered.stop
        if position > len(self._moves):
            raise MoveBufferError(f"keys cover {position} moves but only {len(self._moves)} are buffered")
