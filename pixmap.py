# pixmap.py

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

DEFAULT_MAX_CHANNEL_VALUE = 255


class PixelMap:
    """
    An RGB image stored as three planes (red, green, blue).

    Each plane is a flat uint8 array of width * height samples indexed by
    row * width + column, so the top row comes first and every row runs left
    to right. Build one empty with PixelMap(), zero-filled with
    PixelMap(width, height), or get one back from ppm.read_ppm().
    """
    def __init__(self, width: int = 0, height: int = 0):
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must not be negative, got {width}x{height}")
        self.width: int = width
        self.height: int = height
        self.max_channel_value: int = DEFAULT_MAX_CHANNEL_VALUE

        self.red: NDArray[np.uint8]  # (width * height,) uint8
        self.red = np.zeros(self.size, dtype=np.uint8)
        self.green: NDArray[np.uint8]  # (width * height,) uint8
        self.green = np.zeros(self.size, dtype=np.uint8)
        self.blue: NDArray[np.uint8]  # (width * height,) uint8
        self.blue = np.zeros(self.size, dtype=np.uint8)

    @classmethod
    def from_file(cls, filepath: str) -> PixelMap:
        """Decode filepath and return whatever image came out, ignoring errors."""
        # Local import, ppm depends on this module
        from ppm import read_ppm
        return read_ppm(filepath).pixmap

    @property
    def size(self) -> int:
        return self.width * self.height

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} image")
        i = y * self.width + x
        return int(self.red[i]), int(self.green[i]), int(self.blue[i])

    def to_interleaved(self) -> NDArray[np.uint8]:
        """
        Returns a new (height, width, 3) array with the channels interleaved
        as R, G, B per pixel. This is the layout a display surface expects.
        """
        rgb = np.empty((self.size, 3), dtype=np.uint8)
        rgb[:, 0] = self.red
        rgb[:, 1] = self.green
        rgb[:, 2] = self.blue
        return rgb.reshape((self.height, self.width, 3))

    def copy(self) -> PixelMap:
        other = PixelMap()
        other.width = self.width
        other.height = self.height
        other.max_channel_value = self.max_channel_value
        other.red = self.red.copy()
        other.green = self.green.copy()
        other.blue = self.blue.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelMap):
            return NotImplemented
        return (self.width == other.width
                and self.height == other.height
                and self.max_channel_value == other.max_channel_value
                and np.array_equal(self.red, other.red)
                and np.array_equal(self.green, other.green)
                and np.array_equal(self.blue, other.blue))

    def __repr__(self) -> str:
        return f"PixelMap(width={self.width}, height={self.height}, max_channel_value={self.max_channel_value})"
