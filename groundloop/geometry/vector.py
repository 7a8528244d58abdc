"""Vector2 - the 2D substrate for amplitudes, positions and directions.

Immutable. Every operation returns a new value.
"""
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    """A 2D real vector."""
    x: float = 0.0
    y: float = 0.0

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """Angle from the +x axis in radians, (-pi, pi]."""
        return math.atan2(self.y, self.x)

    @property
    def angle_degrees(self) -> float:
        return math.degrees(self.angle)

    def add(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def sub(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> "Vector2":
        return Vector2(self.x * k, self.y * k)

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y

    def rotate(self, theta: float) -> "Vector2":
        """Rotate counter-clockwise by theta radians."""
        c = math.cos(theta)
        s = math.sin(theta)
        return Vector2(self.x * c - self.y * s, self.x * s + self.y * c)

    def distance(self, other: "Vector2") -> float:
        return self.sub(other).magnitude

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __add__(self, other: "Vector2") -> "Vector2":
        return self.add(other)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return self.sub(other)

    def __mul__(self, k: float) -> "Vector2":
        return self.scale(k)

    __rmul__ = __mul__

    @staticmethod
    def from_polar(r: float, theta: float) -> "Vector2":
        return Vector2(r * math.cos(theta), r * math.sin(theta))

    @staticmethod
    def unit(theta: float) -> "Vector2":
        """Unit vector at angle theta."""
        return Vector2(math.cos(theta), math.sin(theta))


ZERO = Vector2(0.0, 0.0)


def wrap_angle(theta: float) -> float:
    """Wrap an angle into [-pi, pi] by whole turns."""
    while theta > math.pi:
        theta -= 2 * math.pi
    while theta < -math.pi:
        theta += 2 * math.pi
    return theta
