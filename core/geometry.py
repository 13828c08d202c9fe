"""
Geometry management for the G-code preview.

Flattens interpreted motions into straight line segments for a renderer and
keeps the line-to-geometry mapping used for editor highlighting.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from config.preview_config import Color, PreviewConfig
from core.canonical import Motion, MotionType
from utils.geometry import (
    Point3D,
    arc_sweep_angle,
    chord_segment_count,
    rotate_xy,
)

logger = logging.getLogger(__name__)


class SegmentColor(Enum):
    RAPID = "rapid"
    FEED = "feed"


@dataclass(frozen=True)
class Segment:
    """One drawable straight line of the toolpath."""
    start: Point3D
    end: Point3D
    color: SegmentColor
    line_number: int = 0

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


class Tessellator:
    """Turns motions into line segments, splitting arcs into chords."""

    def __init__(self, config: Optional[PreviewConfig] = None):
        self.config = config or PreviewConfig()

    def tessellate(self, motions: Iterable[Motion]) -> List[Segment]:
        """Flatten every motion, in order."""
        segments: List[Segment] = []
        for motion in motions:
            segments.extend(self.tessellate_motion(motion))
        logger.debug("Tessellated into %d segments", len(segments))
        return segments

    def tessellate_motion(self, motion: Motion) -> List[Segment]:
        """Flatten one motion; every resulting segment shares its color."""
        color = SegmentColor.RAPID if motion.feed is None else SegmentColor.FEED

        if not motion.is_arc:
            return [Segment(motion.start, motion.end, color, motion.source_line_number)]

        points = self._arc_points(motion)
        return [
            Segment(a, b, color, motion.source_line_number)
            for a, b in zip(points, points[1:])
        ]

    def flatten(self, motions: Iterable[Motion]) -> Tuple[List[Point3D], List[Color]]:
        """
        Vertex and color lists for line-list rendering.

        The lists are paired 1:1 and every two consecutive vertices form one
        segment.
        """
        vertices: List[Point3D] = []
        colors: List[Color] = []
        for segment in self.tessellate(motions):
            color = self.color_for(segment.color)
            vertices.append(segment.start)
            vertices.append(segment.end)
            colors.append(color)
            colors.append(color)
        return vertices, colors

    def color_for(self, tag: SegmentColor) -> Color:
        if tag is SegmentColor.RAPID:
            return self.config.rapid_color
        return self.config.feed_color

    def _arc_points(self, motion: Motion) -> List[Point3D]:
        """
        Polyline through an arc, starting at motion.start and ending exactly
        at motion.end.

        The sweep is divided into n + 1 equal angular steps, where n comes
        from the sagitta bound. The first n points are interpolated; the last
        step is a closing chord to the recorded end point, which also absorbs
        floating point drift and any residual radius mismatch.
        """
        start, end, center = motion.start, motion.end, motion.center
        clockwise = motion.motion_type is MotionType.CLOCKWISE_ARC

        angle = arc_sweep_angle(start, end, center, clockwise, self.config.sweep_epsilon)
        radius = start.xy_distance_to(center)
        count = chord_segment_count(angle, radius, self.config.chord_tolerance)
        steps = count + 1

        vx, vy = start.x - center.x, start.y - center.y
        dz = end.z - start.z

        points = [start]
        for i in range(1, count + 1):
            fraction = i / steps
            rx, ry = rotate_xy(vx, vy, angle * fraction)
            points.append(Point3D(center.x + rx, center.y + ry, start.z + dz * fraction))
        points.append(end)
        return points


def tessellate(motions: Iterable[Motion], config: Optional[PreviewConfig] = None) -> List[Segment]:
    return Tessellator(config).tessellate(motions)


def flatten(motions: Iterable[Motion],
            config: Optional[PreviewConfig] = None) -> Tuple[List[Point3D], List[Color]]:
    return Tessellator(config).flatten(motions)


def to_vertex_buffers(vertices: List[Point3D], colors: List[Color]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pack vertex and color lists into contiguous float32 arrays of shape (N, 3),
    ready to upload as GPU vertex attributes.
    """
    if len(vertices) != len(colors):
        raise ValueError(f"{len(vertices)} vertices but {len(colors)} colors")

    positions = np.array([v.to_tuple() for v in vertices], dtype=np.float32).reshape(-1, 3)
    rgb = np.array(colors, dtype=np.float32).reshape(-1, 3)
    return np.ascontiguousarray(positions), np.ascontiguousarray(rgb)


def toolpath_extent(vertices: List[Point3D]) -> Tuple[Point3D, Point3D]:
    """Axis-aligned bounding box of the vertices; all zeros when empty."""
    if not vertices:
        return Point3D(0.0, 0.0, 0.0), Point3D(0.0, 0.0, 0.0)

    coords = np.array([v.to_tuple() for v in vertices], dtype=np.float64)
    low = coords.min(axis=0)
    high = coords.max(axis=0)
    return Point3D(*map(float, low)), Point3D(*map(float, high))


class GeometryManager:
    """Holds the current toolpath segments and maintains line-to-geometry mapping."""

    def __init__(self):
        self.segments: List[Segment] = []
        self.line_to_segments: Dict[int, List[int]] = {}  # line_number -> segment indices

    def load(self, segments: List[Segment]):
        """Replace the held geometry."""
        self.clear()
        for index, segment in enumerate(segments):
            self.segments.append(segment)
            self.line_to_segments.setdefault(segment.line_number, []).append(index)

    def get_segments_for_line(self, line_number: int) -> List[Segment]:
        """Get all geometry segments for a specific line number."""
        return [self.segments[i] for i in self.line_to_segments.get(line_number, [])]

    def get_segment_ids_for_line(self, line_number: int) -> List[int]:
        return list(self.line_to_segments.get(line_number, []))

    def get_all_segments(self) -> List[Segment]:
        """Get all geometry segments."""
        return self.segments.copy()

    def get_segments_by_color(self, color: SegmentColor) -> List[Segment]:
        return [seg for seg in self.segments if seg.color is color]

    def get_vertices(self) -> List[Point3D]:
        vertices: List[Point3D] = []
        for segment in self.segments:
            vertices.append(segment.start)
            vertices.append(segment.end)
        return vertices

    def get_bounding_box(self) -> Tuple[Point3D, Point3D]:
        """Get the overall bounding box of all geometry."""
        return toolpath_extent(self.get_vertices())

    def get_statistics(self) -> Dict[str, Any]:
        """Get toolpath statistics."""
        rapid = self.get_segments_by_color(SegmentColor.RAPID)
        feed = self.get_segments_by_color(SegmentColor.FEED)
        rapid_length = sum(seg.length for seg in rapid)
        feed_length = sum(seg.length for seg in feed)
        return {
            'total_segments': len(self.segments),
            'rapid_segments': len(rapid),
            'feed_segments': len(feed),
            'total_length': rapid_length + feed_length,
            'rapid_length': rapid_length,
            'feed_length': feed_length,
            'lines_with_geometry': len(self.line_to_segments),
        }

    def clear(self):
        """Clear all geometry data."""
        self.segments.clear()
        self.line_to_segments.clear()
