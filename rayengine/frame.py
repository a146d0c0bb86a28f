"""A fixed-size frame buffer of 32-bit pixels."""

from __future__ import annotations

from array import array

__all__ = ["Frame"]

_UINT32_MASK = 0xFFFFFFFF


class Frame:
    """A named, row-major buffer of 32-bit pixel values, initially all zero."""

    def __init__(self, name: str, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self.name = name
        self.width = width
        self.height = height
        self._pixels = array("I", [0]) * (width * height)

    def __repr__(self) -> str:
        return f"Frame(name={self.name!r}, width={self.width}, height={self.height})"

    @property
    def buffer(self) -> memoryview:
        """Read-only view of the raw pixels in row-major order."""
        return memoryview(self._pixels).toreadonly()

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) lies outside the {self.width}x{self.height} frame"
            )
        return x + self.width * y

    def set_pixel(self, x: int, y: int, color: int) -> None:
        """Store a 32-bit colour at (x, y); wider values are truncated to 32 bits."""
        self._pixels[self._index(x, y)] = color & _UINT32_MASK

    def set_pixel_rgba(self, x: int, y: int, r: int, g: int, b: int, a: int) -> None:
        """Store a colour packed from its red, green, blue and alpha parts."""
        self.set_pixel(x, y, r << 6 | g << 4 | b << 2 | a)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the colour stored at (x, y)."""
        return self._pixels[self._index(x, y)]