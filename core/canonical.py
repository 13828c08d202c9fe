"""
Defines the canonical motion records.

The interpreter's sole purpose is to convert G-code lines into a list of
these records. This creates a clean separation between the interpreter logic
and the tessellator that prepares geometry for a renderer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from utils.geometry import Point3D


class MotionType(Enum):
    RAPID = "G0"
    LINEAR = "G1"
    CLOCKWISE_ARC = "G2"
    COUNTER_CLOCKWISE_ARC = "G3"

    @property
    def is_arc(self) -> bool:
        return self in (MotionType.CLOCKWISE_ARC, MotionType.COUNTER_CLOCKWISE_ARC)


@dataclass(frozen=True)
class Motion:
    """
    A fully resolved move in absolute coordinates.

    center is only meaningful for arcs; it is the start point offset by the
    line's I/J values. feed is None exactly when motion_type is RAPID.
    """
    motion_type: MotionType
    start: Point3D
    end: Point3D
    center: Point3D
    feed: Optional[float] = None
    source_line_number: int = 0

    @property
    def is_arc(self) -> bool:
        return self.motion_type.is_arc

    @property
    def is_rapid(self) -> bool:
        return self.feed is None
