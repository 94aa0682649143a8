# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""
GAN Gen2 frame encryption.

Every 20-byte frame is covered by two overlapping AES-128 blocks: bytes [0,16)
and bytes [4,20). Each block is XOR-whitened with the IV before encryption
(and after decryption). Encryption handles the leading block first, so
decryption has to undo the trailing block first.
"""

from __future__ import annotations
import logging
from typing import Dict, Mapping, Optional, Tuple

from Crypto.Cipher import AES

logger = logging.getLogger(__name__)

# Base key and IV, GAN_ENCRYPTION_KEYS[0] of gan-web-bluetooth
BASE_KEY = bytes([0x01, 0x02, 0x42, 0x28, 0x31, 0x91, 0x16, 0x07, 0x20, 0x05, 0x18, 0x54, 0x42, 0x11, 0x12, 0x53])
BASE_IV = bytes([0x11, 0x03, 0x32, 0x28, 0x21, 0x01, 0x76, 0x27, 0x20, 0x95, 0x78, 0x14, 0x32, 0x12, 0x02, 0x43])

# Company identifier the cube advertises its device identifier under
GAN_COMPANY_ID = 0x0001
DEVICE_IDENTIFIER_LENGTH = 9
BLOCK_SIZE = 16


class DeviceIdentifierError(ValueError):
    """The advertisement does not carry a usable device identifier."""


class NoDeviceIdentifier(DeviceIdentifierError):
    def __init__(self):
        super().__init__("manufacturer data missing device identifier")


class InvalidDeviceIdentifier(DeviceIdentifierError):
    def __init__(self, payload: bytes):
        super().__init__(f"device identifier data invalid: {payload.hex()} ({len(payload)} bytes)")
        self.payload = payload


def device_key_from_manufacturer_data(manufacturer_data: Optional[Mapping[int, bytes]]) -> bytes:
    """Return the 6-byte device key (bytes [3,9) of the 9-byte identifier)."""
    payload = (manufacturer_data or {}).get(GAN_COMPANY_ID)
    if payload is None:
        raise NoDeviceIdentifier()
    payload = bytes(payload)
    if len(payload) != DEVICE_IDENTIFIER_LENGTH:
        raise InvalidDeviceIdentifier(payload)
    return payload[3:9]


def derive_key_iv(device_key: bytes) -> Tuple[bytes, bytes]:
    """Derive AES key and IV by adding the device key to the base values, byte-wise mod 255."""
    if len(device_key) != 6:
        raise ValueError(f"device key must be 6 bytes, got {len(device_key)}")

    key = bytearray(BASE_KEY)
    iv = bytearray(BASE_IV)
    for i, salt in enumerate(device_key):
        key[i] = (BASE_KEY[i] + salt) % 0xFF
        iv[i] = (BASE_IV[i] + salt) % 0xFF

    return bytes(key), bytes(iv)


class GanCubeV2Cipher:
    """Per-connection cipher state: the derived key and IV."""

    def __init__(self, key: bytes, iv: bytes):
        if len(key) != BLOCK_SIZE:
            raise ValueError("Key must be 16 bytes")
        if len(iv) != BLOCK_SIZE:
            raise ValueError("IV must be 16 bytes")
        self.key = bytes(key)
        self.iv = bytes(iv)

    @classmethod
    def from_device_key(cls, device_key: bytes) -> "GanCubeV2Cipher":
        return cls(*derive_key_iv(device_key))

    @classmethod
    def from_manufacturer_data(cls, manufacturer_data: Optional[Dict[int, bytes]]) -> "GanCubeV2Cipher":
        device_key = device_key_from_manufacturer_data(manufacturer_data)
        logger.debug("Derived device key %s", device_key.hex())
        return cls.from_device_key(device_key)

    def _block_cipher(self):
        # Single-block CBC with the IV is the XOR whitening around AES
        return AES.new(self.key, AES.MODE_CBC, self.iv)

    def encrypt(self, data: bytes) -> bytes:
        if len(data) < BLOCK_SIZE:
            raise ValueError("Data must be at least 16 bytes long")

        result = bytearray(data)

        # Leading block first, then the trailing block over the already encrypted overlap
        result[:BLOCK_SIZE] = self._block_cipher().encrypt(bytes(result[:BLOCK_SIZE]))
        offset = len(result) - BLOCK_SIZE
        result[offset:] = self._block_cipher().encrypt(bytes(result[offset:]))

        return bytes(result)

    def decrypt(self, data: bytes) -> bytes:
        if len(data) < BLOCK_SIZE:
            raise ValueError("Data must be at least 16 bytes long")

        result = bytearray(data)

        # Trailing block first, mirror image of encrypt()
        offset = len(result) - BLOCK_SIZE
        result[offset:] = self._block_cipher().decrypt(bytes(result[offset:]))
        result[:BLOCK_SIZE] = self._block_cipher().decrypt(bytes(result[:BLOCK_SIZE]))

        return bytes(result)
