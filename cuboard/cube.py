# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Cube pieces, moves and state.

Positions, orientations and moves use the numbering of the Gen2 wire format:
corners UFR, ULF, UBL, URB, DRF, DFL, DLB, DBR; edges UR, UF, UL, UB, DR, DF,
DL, DB, FR, FL, BL, BR; moves U, U', R, R', F, F', D, D', L, L', B, B'.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence

FACES_ORDER = "URFDLB"

# U: white, R: red, F: green, D: yellow, L: orange, B: blue
SOLVED_FACELETS = "UUUUUUUUURRRRRRRRRFFFFFFFFFDDDDDDDDDLLLLLLLLLBBBBBBBBB"


class InvalidCubeState(ValueError):
    """Raw piece arrays that do not describe a reachable cube."""


# ---------------- Piece orientations ----------------

class PieceOrientation:
    """Twist of a piece relative to its home slot, an element of Z/modulus."""

    modulus = 1
    __slots__ = ("value",)

    def __init__(self, value: int = 0):
        value = int(value)
        if not 0 <= value < self.modulus:
            raise ValueError(f"{type(self).__name__} must be in [0, {self.modulus}), got {value}")
        self.value = value

    def __add__(self, other: "PieceOrientation") -> "PieceOrientation":
        if type(other) is not type(self):
            return NotImplemented
        return type(self)((self.value + other.value) % self.modulus)

    def __sub__(self, other: "PieceOrientation") -> "PieceOrientation":
        if type(other) is not type(self):
            return NotImplemented
        return self + (-other)

    def __neg__(self) -> "PieceOrientation":
        return type(self)((self.modulus - self.value) % self.modulus)

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and other.value == self.value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value))

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"

    @classmethod
    def total(cls, orientations: Iterable["PieceOrientation"]) -> "PieceOrientation":
        result = cls()
        for orientation in orientations:
            result = result + orientation
        return result

    @classmethod
    def balancing(cls, orientations: Iterable["PieceOrientation"]) -> "PieceOrientation":
        """The orientation that brings the sum of `orientations` back to zero."""
        return -cls.total(orientations)


class CornerOrientation(PieceOrientation):
    """0 normal, 1 clockwise, 2 counter-clockwise."""
    modulus = 3
    __slots__ = ()


class EdgeOrientation(PieceOrientation):
    """0 normal, 1 flipped."""
    modulus = 2
    __slots__ = ()


class CenterOrientation(PieceOrientation):
    """Quarter twists of a center piece; only reported by later protocol variants."""
    modulus = 4
    __slots__ = ()


# ---------------- Piece positions ----------------

class CornerPosition(IntEnum):
    UFR = 0
    ULF = 1
    UBL = 2
    URB = 3
    DRF = 4
    DFL = 5
    DLB = 6
    DBR = 7


class EdgePosition(IntEnum):
    UR = 0
    UF = 1
    UL = 2
    UB = 3
    DR = 4
    DF = 5
    DL = 6
    DB = 7
    FR = 8
    FL = 9
    BL = 10
    BR = 11


def _rotate_name(name: str, amount: int) -> str:
    amount %= len(name)
    return name[amount:] + name[:amount]


@dataclass(frozen=True)
class Corner:
    position: CornerPosition
    orientation: CornerOrientation = field(default_factory=CornerOrientation)

    def show(self) -> str:
        """Name of the piece read from its twisted sticker, e.g. UFR twisted clockwise is FRU."""
        return _rotate_name(self.position.name, self.orientation.value)


@dataclass(frozen=True)
class Edge:
    position: EdgePosition
    orientation: EdgeOrientation = field(default_factory=EdgeOrientation)

    def show(self) -> str:
        return _rotate_name(self.position.name, self.orientation.value)


# ---------------- Cube state ----------------

@dataclass
class CubeStateRaw:
    """Wire-level cube state: plain integers, not validated."""
    # Corner Permutation: 8 elements, values from 0 to 7
    corners_position: List[int] = field(default_factory=lambda: list(range(8)))
    # Corner Orientation: 8 elements, values from 0 to 2
    corners_orientation: List[int] = field(default_factory=lambda: [0] * 8)
    # Edge Permutation: 12 elements, values from 0 to 11
    edges_position: List[int] = field(default_factory=lambda: list(range(12)))
    # Edge Orientation: 12 elements, values from 0 to 1
    edges_orientation: List[int] = field(default_factory=lambda: [0] * 12)


def _check_permutation(values: Sequence[int], size: int, what: str) -> None:
    if len(values) != size or sorted(values) != list(range(size)):
        raise InvalidCubeState(f"{what} positions are not a permutation of 0..{size - 1}: {list(values)}")


@dataclass(frozen=True)
class CubeState:
    """Validated snapshot of the cube; created from each state report, never mutated."""
    corners: tuple
    edges: tuple
    centers: Optional[tuple] = None

    def __post_init__(self):
        _check_permutation([int(c.position) for c in self.corners], 8, "corner")
        _check_permutation([int(e.position) for e in self.edges], 12, "edge")
        if CornerOrientation.total(c.orientation for c in self.corners).value != 0:
            raise InvalidCubeState("corner orientations do not sum to 0 mod 3")
        if EdgeOrientation.total(e.orientation for e in self.edges).value != 0:
            raise InvalidCubeState("edge orientations do not sum to 0 mod 2")
        if self.centers is not None and len(self.centers) != 6:
            raise InvalidCubeState(f"expected 6 center orientations, got {len(self.centers)}")

    @classmethod
    def solved(cls) -> "CubeState":
        """Return a solved cube state."""
        return cls.from_raw(CubeStateRaw())

    @classmethod
    def from_raw(cls, raw: CubeStateRaw) -> "CubeState":
        try:
            corners = tuple(
                Corner(CornerPosition(p), CornerOrientation(o))
                for p, o in zip(raw.corners_position, raw.corners_orientation, strict=True)
            )
            edges = tuple(
                Edge(EdgePosition(p), EdgeOrientation(o))
                for p, o in zip(raw.edges_position, raw.edges_orientation, strict=True)
            )
        except ValueError as e:
            raise InvalidCubeState(str(e)) from e
        return cls(corners=corners, edges=edges)

    def to_raw(self) -> CubeStateRaw:
        return CubeStateRaw(
            corners_position=[int(c.position) for c in self.corners],
            corners_orientation=[c.orientation.value for c in self.corners],
            edges_position=[int(e.position) for e in self.edges],
            edges_orientation=[e.orientation.value for e in self.edges],
        )

    def is_solved(self) -> bool:
        """Check if the cube is in solved state."""
        return self.to_facelets() == SOLVED_FACELETS

    def to_facelets(self) -> str:
        """54-char facelet string in Kociemba notation (URFDLB face order)."""
        facelets: List[str] = [FACES_ORDER[i // 9] for i in range(54)]

        for i, corner in enumerate(self.corners):
            for p in range(3):
                source = CORNER_FACELET_MAP[int(corner.position)][p]
                facelets[CORNER_FACELET_MAP[i][(p + corner.orientation.value) % 3]] = FACES_ORDER[source // 9]

        for i, edge in enumerate(self.edges):
            for p in range(2):
                source = EDGE_FACELET_MAP[int(edge.position)][p]
                facelets[EDGE_FACELET_MAP[i][(p + edge.orientation.value) % 2]] = FACES_ORDER[source // 9]

        return ''.join(facelets)


# Facelet indices of each corner / edge slot, stickers listed starting from the U/D (or F/B) one
CORNER_FACELET_MAP = [
    (8, 9, 20),   # UFR
    (6, 18, 38),  # ULF
    (0, 36, 47),  # UBL
    (2, 45, 11),  # URB
    (29, 26, 15), # DRF
    (27, 44, 24), # DFL
    (33, 53, 42), # DLB
    (35, 17, 51), # DBR
]

EDGE_FACELET_MAP = [
    (5, 10),   # UR
    (7, 19),   # UF
    (3, 37),   # UL
    (1, 46),   # UB
    (32, 16),  # DR
    (28, 25),  # DF
    (30, 43),  # DL
    (34, 52),  # DB
    (23, 12),  # FR
    (21, 41),  # FL
    (50, 39),  # BL
    (48, 14),  # BR
]


# ---------------- Moves ----------------

class Axis(IntEnum):
    UD = 0
    RL = 1
    FB = 2


class CubeMove(IntEnum):
    """Quarter turn of one face; the value is the 5-bit code used on the wire."""
    U = 0
    Up = 1
    R = 2
    Rp = 3
    F = 4
    Fp = 5
    D = 6
    Dp = 7
    L = 8
    Lp = 9
    B = 10
    Bp = 11

    def __str__(self) -> str:
        return self.name.replace("p", "'")

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    @classmethod
    def parse(cls, notation: str) -> "CubeMove":
        """Parse "R" / "R'" style notation."""
        try:
            return cls[notation.strip().replace("'", "p")]
        except KeyError:
            raise ValueError(f"Invalid move notation: {notation!r}") from None

    @classmethod
    def from_code(cls, code: int) -> Optional["CubeMove"]:
        """Move for a wire code, None when the code is out of range."""
        if 0 <= code < len(cls):
            return cls(code)
        return None

    @property
    def face_index(self) -> int:
        """Index into FACES_ORDER."""
        return self.value // 2

    @property
    def is_prime(self) -> bool:
        return self.value % 2 == 1

    @property
    def axis(self) -> Axis:
        return Axis(self.face_index % 3)

    def face(self) -> "CubeMove":
        """The clockwise move of the same face."""
        return CubeMove(self.value & ~1)

    def rev(self) -> "CubeMove":
        """Same face, opposite direction."""
        return CubeMove(self.value ^ 1)

    inverse = rev

    def mirror(self) -> "CubeMove":
        """The move seen through a point reflection of the cube: U -> D', R -> L' ..."""
        opposite = (self.face_index + 3) % 6
        return CubeMove(opposite * 2 + (1 - self.value % 2))

    def commute(self, other: "CubeMove") -> bool:
        """Moves on the same axis commute with each other."""
        return self.axis == other.axis


def format_moves(moves: Sequence[CubeMove]) -> str:
    """Compact notation grouping runs of equal moves, e.g. [R, R, U'] -> "R2U'"."""
    groups: List[List[CubeMove]] = []
    for move in moves:
        if groups and groups[-1][0] == move:
            groups[-1].append(move)
        else:
            groups.append([move])
    return ''.join(str(g[0]) if len(g) == 1 else f"{g[0]}{len(g)}" for g in groups)
