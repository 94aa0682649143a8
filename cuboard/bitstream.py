# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
Bit-level views over fixed-size protocol frames.

Both classes address bits the same way: bit 0 is the most significant bit of
byte 0, and multi-bit words are read/written most significant bit first. A
frame written with ``ProtocolMessageWriter`` reads back unchanged through
``ProtocolMessageView``.
"""

from __future__ import annotations
from typing import Union

MAX_WORD_BITS = 32


def _check_range(total_bits: int, start_bit: int, bit_length: int) -> None:
    if bit_length < 0 or bit_length > MAX_WORD_BITS:
        raise ValueError(f"bit_length must be between 0 and {MAX_WORD_BITS}, got {bit_length}")
    if start_bit < 0 or start_bit + bit_length > total_bits:
        raise ValueError("Requested bits exceed message length")


class ProtocolMessageView:
    """Binary view helper that reads arbitrary bit-length words from a byte sequence.

    Words are consumed sequentially with ``extract``; ``get_bit_word`` gives
    random access without moving the cursor.
    """

    def __init__(self, message: Union[bytes, bytearray]):
        self._data = bytes(message)
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def remaining(self) -> int:
        """Number of bits left after the cursor."""
        return len(self._data) * 8 - self._index

    def get_bit_word(self, start_bit: int, bit_length: int) -> int:
        """Return the unsigned integer held by `bit_length` bits starting at `start_bit`."""
        _check_range(len(self._data) * 8, start_bit, bit_length)
        value = 0
        for bit in range(start_bit, start_bit + bit_length):
            value = (value << 1) | ((self._data[bit // 8] >> (7 - bit % 8)) & 1)
        return value

    def extract(self, bit_length: int) -> int:
        value = self.get_bit_word(self._index, bit_length)
        self._index += bit_length
        return value

    def skip(self, bit_length: int) -> None:
        if bit_length < 0 or self._index + bit_length > len(self._data) * 8:
            raise ValueError("Requested bits exceed message length")
        self._index += bit_length

    def reset(self) -> None:
        self._index = 0


class ProtocolMessageWriter:
    """Writes bit words into a zero-initialised frame of fixed size."""

    def __init__(self, size: int):
        self._data = bytearray(size)
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def assign(self, bit_length: int, value: int) -> None:
        """Write the low `bit_length` bits of `value` at the cursor."""
        _check_range(len(self._data) * 8, self._index, bit_length)
        for offset in range(bit_length):
            bit = self._index + offset
            mask = 1 << (7 - bit % 8)
            if (value >> (bit_length - 1 - offset)) & 1:
                self._data[bit // 8] |= mask
            else:
                self._data[bit // 8] &= ~mask & 0xFF
        self._index += bit_length

    def skip(self, bit_length: int) -> None:
        if bit_length < 0 or self._index + bit_length > len(self._data) * 8:
            raise ValueError("Requested bits exceed message length")
        self._index += bit_length

    def reset(self) -> None:
        self._index = 0

    def to_bytes(self) -> bytes:
        return bytes(self._data)
