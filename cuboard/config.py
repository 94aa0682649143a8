# SPDX-License-Identifier: LicenseRef-CubeAlarm-Custom-Attribution
# Copyright (c) 2025 Paul Shapiro
"""Environment based settings."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .keymap import DEFAULT_KEYMAP, load_keymap
from .orientation import CubeOrientation


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    device_prefix: str = "GAN"
    scan_timeout: float = 5.0
    scan_attempts: int = 3
    keymap_path: Optional[str] = None
    orientation: str = "URFDLB"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        try:
            return cls(
                log_level=env.get("CUBOARD_LOG_LEVEL", "INFO").upper(),
                device_prefix=env.get("CUBOARD_DEVICE_PREFIX", "GAN"),
                scan_timeout=float(env.get("CUBOARD_SCAN_TIMEOUT", "5")),
                scan_attempts=int(env.get("CUBOARD_SCAN_ATTEMPTS", "3")),
                keymap_path=env.get("CUBOARD_KEYMAP") or None,
                orientation=env.get("CUBOARD_ORIENTATION", "URFDLB").upper(),
            )
        except ValueError as e:
            raise ValueError(f"Invalid cuboard configuration: {e}") from e

    def load_keymap(self) -> List[List[List[str]]]:
        if self.keymap_path:
            return load_keymap(self.keymap_path)
        return [[list(row) for row in table] for table in DEFAULT_KEYMAP]

    def cube_orientation(self) -> CubeOrientation:
        return CubeOrientation(self.orientation)
