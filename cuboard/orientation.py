# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Whole-cube reorientations: the 48 symmetries of the cube (24 rotations and
24 rotations composed with a mirror).

An orientation is named by six face letters <A><B><C><D><E><F>: face A is
moved to up, B to right, C to front, D to down, E to left and F to back.
"""

from __future__ import annotations
from functools import reduce
from typing import Dict, Iterable, List, Sequence, Tuple, TypeVar

from .cube import FACES_ORDER, CubeMove

_NAMES = [
    "URFDLB", "UFLDBR", "ULBDRF", "UBRDFL", "DFRUBL", "DLFURB", "DBLUFR", "DRBULF",
    "FURBDL", "LUFRDB", "BULFDR", "RUBLDF", "RDFLUB", "FDLBUR", "LDBRUF", "BDRFUL",
    "RFULBD", "FLUBRD", "LBURFD", "BRUFLD", "FRDBLU", "LFDRBU", "BLDFRU", "RBDLFU",
    # mirrored
    "FRUBLD", "LFURBD", "BLUFRD", "RBULFD", "RFDLBU", "FLDBRU", "LBDRFU", "BRDFLU",
    "UFRDBL", "ULFDRB", "UBLDFR", "URBDLF", "DRFULB", "DFLUBR", "DLBURF", "DBRUFL",
    "RUFLDB", "FULBDR", "LUBRDF", "BURFDL", "FDRBUL", "LDFRUB", "BDLFUR", "RDBLUF",
]

# Outward normal of each face, in a right-handed frame
_FACE_VECTORS = {
    "U": (0, 0, 1), "D": (0, 0, -1),
    "R": (1, 0, 0), "L": (-1, 0, 0),
    "F": (0, -1, 0), "B": (0, 1, 0),
}


def _det(name: str) -> int:
    (a, b, c), (d, e, f), (g, h, i) = (_FACE_VECTORS[ch] for ch in name[:3])
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


class CubeOrientation:
    """One element of the cube symmetry group.

    ``a + b`` composes two orientations so that transforming a move by ``a``
    and then by ``b`` equals transforming it by ``a + b``; ``-a`` is the
    inverse and ``CubeOrientation.sum`` folds a sequence with ``+``.
    """

    __slots__ = ("name", "perm")

    _by_name: Dict[str, "CubeOrientation"] = {}
    _values: List["CubeOrientation"] = []

    def __init__(self, name: str):
        self.name = name
        self.perm = tuple(FACES_ORDER.index(ch) for ch in name)

    def __new__(cls, name: str):
        existing = cls._by_name.get(name)
        if existing is not None:
            return existing
        if name not in _NAMES:
            raise ValueError(f"Unknown cube orientation: {name!r}")
        return super().__new__(cls)

    @classmethod
    def values(cls) -> List["CubeOrientation"]:
        return list(cls._values)

    @classmethod
    def identity(cls) -> "CubeOrientation":
        return cls._values[0]

    @classmethod
    def from_perm(cls, perm: Sequence[int]) -> "CubeOrientation":
        return cls(''.join(FACES_ORDER[i] for i in perm))

    @classmethod
    def sum(cls, orientations: Iterable["CubeOrientation"]) -> "CubeOrientation":
        return reduce(lambda lhs, rhs: lhs + rhs, orientations, cls.identity())

    @property
    def repr(self) -> int:
        return _NAMES.index(self.name)

    def is_mirror(self) -> bool:
        return _det(self.name) != _det(FACES_ORDER)

    def __add__(self, other: "CubeOrientation") -> "CubeOrientation":
        if not isinstance(other, CubeOrientation):
            return NotImplemented
        return CubeOrientation.from_perm([self.perm[i] for i in other.perm])

    def __neg__(self) -> "CubeOrientation":
        return CubeOrientation.from_perm([self.perm.index(i) for i in range(6)])

    def __repr__(self) -> str:
        return f"CubeOrientation.{self.name}"

    def __str__(self) -> str:
        return self.name

    def transform(self, move: CubeMove) -> CubeMove:
        """Re-express `move` in this orientation's frame."""
        face = self.perm.index(move.face_index)
        prime = move.is_prime != self.is_mirror()
        return CubeMove(face * 2 + int(prime))

    def as_map(self) -> Dict[CubeMove, CubeMove]:
        return {move: self.transform(move) for move in CubeMove}


for _name in _NAMES:
    _orientation = CubeOrientation(_name)
    CubeOrientation._by_name[_name] = _orientation
    CubeOrientation._values.append(_orientation)
del _name, _orientation

IDENTITY = CubeOrientation("URFDLB")

# rotate along face
ROTATE_U = CubeOrientation("UBRDFL")
ROTATE_D = CubeOrientation("UFLDBR")
ROTATE_R = CubeOrientation("FRDBLU")
ROTATE_L = CubeOrientation("BRUFLD")
ROTATE_F = CubeOrientation("LUFRDB")
ROTATE_B = CubeOrientation("RDFLUB")

# swap face
MIRROR_UD = CubeOrientation("DRFULB")
MIRROR_RL = CubeOrientation("ULFDRB")
MIRROR_FB = CubeOrientation("URBDLF")


T = TypeVar("T")


def span(generators: Sequence[T]) -> List[Tuple[T, List[T]]]:
    """Every element reachable from `generators`, each with a word of generators producing it."""
    result: List[Tuple[T, List[T]]] = [(g, [g]) for g in generators]
    paths = {g: [g] for g in generators}
    leaves = list(generators)

    while leaves:
        leaf = leaves.pop()
        path = paths[leaf]
        for g in generators:
            following = leaf + g
            if following in paths:
                continue
            paths[following] = path + [g]
            result.append((following, paths[following]))
            leaves.append(following)
    return result
