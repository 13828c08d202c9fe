"""
Utility functions for geometric calculations, primarily for arcs.

Arcs are circular in the XY plane only. Z is carried along linearly by the
tessellator, so every function here works on the XY projection.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Point3D:
    """Represents a 3D point."""
    x: float
    y: float
    z: float

    def to_list(self) -> List[float]:
        """Convert to list format."""
        return [self.x, self.y, self.z]

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance_to(self, other: 'Point3D') -> float:
        """Calculate distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx*dx + dy*dy + dz*dz)

    def xy_distance_to(self, other: 'Point3D') -> float:
        """Distance to another point, ignoring Z."""
        return math.hypot(self.x - other.x, self.y - other.y)


def arc_radius_difference(start: Point3D, end: Point3D, center: Point3D) -> Tuple[float, float]:
    """Return (radius at start, |radius at start - radius at end|)."""
    radius_start = start.xy_distance_to(center)
    radius_end = end.xy_distance_to(center)
    return radius_start, abs(radius_start - radius_end)


def is_arc_radius_consistent(start: Point3D, end: Point3D, center: Point3D,
                             absolute_tolerance: float = 0.5,
                             minimum_tolerance: float = 0.005,
                             relative_tolerance: float = 0.001) -> bool:
    """
    Check that start and end lie on the same circle around center.

    An arc is rejected when the radii differ by more than absolute_tolerance,
    or by more than both minimum_tolerance and relative_tolerance times the
    start radius. Radii that are not finite never match.
    """
    radius_start, diff = arc_radius_difference(start, end, center)
    if not math.isfinite(diff):
        return False
    if diff > absolute_tolerance:
        return False
    if diff > minimum_tolerance and diff > relative_tolerance * radius_start:
        return False
    return True


def arc_sweep_angle(start: Point3D, end: Point3D, center: Point3D,
                    clockwise: bool, epsilon: float = 5e-7) -> float:
    """
    Signed angle swept from start to end around center.

    Clockwise sweeps are negative and counter-clockwise sweeps positive. A raw
    angle whose sign disagrees with the direction is shifted by a full turn;
    angles within epsilon of zero are left alone, so coincident start and end
    points give an empty sweep rather than a full circle.
    """
    sx, sy = start.x - center.x, start.y - center.y
    ex, ey = end.x - center.x, end.y - center.y

    angle = math.atan2(sx * ey - sy * ex, sx * ex + sy * ey)

    if clockwise and angle >= epsilon:
        angle -= TWO_PI
    elif not clockwise and angle <= -epsilon:
        angle += TWO_PI
    return angle


def chord_segment_count(angle: float, radius: float, tolerance: float) -> int:
    """
    Number of equal angular steps that keep each chord within tolerance.

    Uses the sagitta bound: a chord of half-length sqrt(tol * (2r - tol))
    deviates from its arc by exactly tol.
    """
    half_chord_sq = tolerance * (2.0 * radius - tolerance)
    if half_chord_sq <= 0.0:
        # Radius below tolerance/2; the closing chord alone is within bounds
        return 0
    return int(math.floor(abs(0.5 * angle * radius) / math.sqrt(half_chord_sq)))


def rotate_xy(x: float, y: float, theta: float) -> Tuple[float, float]:
    """Rotate the vector (x, y) counter-clockwise by theta radians."""
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return (x * cos_t - y * sin_t, x * sin_t + y * cos_t)


def chord_deviation(radius: float, angle: float) -> float:
    """Maximum distance between an arc of the given angle and its chord."""
    return radius * (1.0 - math.cos(abs(angle) / 2.0))
