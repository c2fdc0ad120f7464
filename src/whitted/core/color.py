"""Linear RGB colors and the named color table.

Colors are stored as unbounded floats so that lighting sums such as
ambient + diffuse + specular can exceed 1.0 while they are accumulated.
Saturation happens explicitly: clamped() limits each channel to [0, 1] and
to_rgb8() quantizes to 8-bit channels without ever wrapping around.

Example:
    >>> from src.whitted.core.color import Color, WHITE
    >>> (WHITE * 1.9).to_rgb8()
    (255, 255, 255)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence


def _saturate(value: float) -> float:
    if value != value:  # NaN
        return 0.0
    return min(max(value, 0.0), 1.0)


@dataclass(frozen=True, slots=True)
class Color:
    """Linear RGB color.

    Attributes:
        r: Red channel (1.0 is full intensity).
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    @classmethod
    def from_rgb8(cls, rgb: Sequence[int]) -> Color:
        """Build a color from 8-bit channel values."""
        return cls(rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Color:
        if len(values) != 3:
            raise ValueError(f"Color needs exactly 3 channels, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        if isinstance(other, (int, float)):
            return Color(self.r * other, self.g * other, self.b * other)
        return NotImplemented

    def __rmul__(self, other: float) -> Color:
        return self.__mul__(other)

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def clamped(self) -> Color:
        """Return the color with every channel saturated to [0, 1]."""
        return Color(_saturate(self.r), _saturate(self.g), _saturate(self.b))

    def to_rgb8(self) -> tuple[int, int, int]:
        """Quantize to 8-bit channels, saturating out-of-range values."""
        c = self.clamped()
        return (
            int(c.r * 255.0 + 0.5),
            int(c.g * 255.0 + 0.5),
            int(c.b * 255.0 + 0.5),
        )

    def is_black(self) -> bool:
        return self.r == 0.0 and self.g == 0.0 and self.b == 0.0


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
YELLOW = Color(1.0, 1.0, 0.0)
MAGENTA = Color(1.0, 0.0, 1.0)
CYAN = Color(0.0, 1.0, 1.0)
GRAY = Color(0.5, 0.5, 0.5)

# Read-only lookup used by scene configuration ("background": "white")
NAMED_COLORS: Mapping[str, Color] = MappingProxyType(
    {
        "black": BLACK,
        "white": WHITE,
        "red": RED,
        "green": GREEN,
        "blue": BLUE,
        "yellow": YELLOW,
        "magenta": MAGENTA,
        "cyan": CYAN,
        "gray": GRAY,
    }
)


def color_from_spec(value: str | Sequence[float] | Color) -> Color:
    """Resolve a color given as a name, an RGB sequence or a Color.

    Raises:
        ValueError: If the name is unknown or the sequence is not RGB.
    """
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        try:
            return NAMED_COLORS[value.lower()]
        except KeyError:
            raise ValueError(f"Unknown color name: {value}") from None
    return Color.from_sequence(value)
