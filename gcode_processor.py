"""
Main G-code processor interface.
This is the primary entry point for the G-code preview pipeline.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from config.preview_config import PreviewConfig
from core.canonical import Motion
from core.geometry import GeometryManager, Segment, SegmentColor, Tessellator, to_vertex_buffers
from core.interpreter import GCodeInterpreter
from core.lexer import GCodeLexer
from core.parser import Line, parse
from utils.errors import ErrorCollector, ErrorRecord, GCodeError

logger = logging.getLogger(__name__)


class GCodeProcessor:
    """
    Main interface for G-code processing.
    Provides a simple API for text editors and 3D visualization tools.

    A failed run records its error and leaves the geometry of the last
    successful run in place, so a viewer keeps showing something useful
    while the program is being edited.
    """

    def __init__(self, config: Optional[PreviewConfig] = None):
        self.config = config or PreviewConfig()
        self.lexer = GCodeLexer()
        self.interpreter = GCodeInterpreter(self.config)
        self.tessellator = Tessellator(self.config)
        self.geometry_manager = GeometryManager()
        self.error_collector = ErrorCollector()

        self.lines: List[Line] = []
        self.motions: List[Motion] = []
        self._last_processed_text = ""
        self._processing_successful = False

    def process_gcode(self, gcode_text: str) -> bool:
        """
        Process G-code text and generate toolpath geometry.

        Args:
            gcode_text: Raw G-code text to process

        Returns:
            True if processing succeeded; on failure the error is available
            from get_all_errors() and the previous geometry is kept.
        """
        self._last_processed_text = gcode_text
        self.error_collector.clear()

        try:
            lines = parse(gcode_text, self.lexer)
            motions = self.interpreter.run(lines)
            segments = self.tessellator.tessellate(motions)
        except GCodeError as e:
            logger.warning("G-code rejected: %s", e)
            self.error_collector.add_error(e)
            self._processing_successful = False
            return False

        self.lines = lines
        self.motions = motions
        self.geometry_manager.load(segments)
        self._processing_successful = True
        logger.info("Processed %d lines into %d motions and %d segments",
                    len(lines), len(motions), len(segments))
        return True

    def validate_syntax(self, gcode_text: str) -> bool:
        """
        Validate G-code syntax without interpretation.
        Useful for real-time editor feedback.
        """
        self.error_collector.clear()
        try:
            parse(gcode_text, self.lexer)
        except GCodeError as e:
            self.error_collector.add_error(e)
            return False
        return True

    # Error handling methods for editor integration

    def get_errors_for_line(self, line_number: int) -> List[ErrorRecord]:
        """Get all errors for a specific line number."""
        return self.error_collector.get_errors_for_line(line_number)

    def get_all_errors(self) -> List[ErrorRecord]:
        """Get all errors from the last processing."""
        return self.error_collector.get_all_errors()

    def has_errors(self) -> bool:
        """Check if there are any errors (excluding warnings)."""
        return self.error_collector.has_errors()

    # Geometry methods for 3D visualization

    def get_geometry_for_line(self, line_number: int) -> List[Segment]:
        """Get all geometry segments for a specific line number."""
        return self.geometry_manager.get_segments_for_line(line_number)

    def get_all_geometry(self) -> List[Segment]:
        """Get all geometry segments."""
        return self.geometry_manager.get_all_segments()

    def get_rapid_moves(self) -> List[Segment]:
        """Get all rapid movement geometry."""
        return self.geometry_manager.get_segments_by_color(SegmentColor.RAPID)

    def get_feed_moves(self) -> List[Segment]:
        """Get all feed movement geometry, arcs included."""
        return self.geometry_manager.get_segments_by_color(SegmentColor.FEED)

    def get_vertex_buffers(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Position and color arrays for the current geometry, each float32
        with shape (N, 3); two consecutive rows form one line.
        """
        vertices = self.geometry_manager.get_vertices()
        colors = []
        for segment in self.geometry_manager.segments:
            color = self.tessellator.color_for(segment.color)
            colors.append(color)
            colors.append(color)
        return to_vertex_buffers(vertices, colors)

    def get_bounding_box(self) -> Tuple[List[float], List[float]]:
        """
        Get the bounding box of all geometry.

        Returns:
            Tuple of (min_point, max_point) as [x, y, z] lists
        """
        min_point, max_point = self.geometry_manager.get_bounding_box()
        return min_point.to_list(), max_point.to_list()

    # Statistics and information methods

    def get_statistics(self) -> Dict[str, Any]:
        """Get processing and toolpath statistics."""
        return {
            'processing': {
                'total_lines': len(self.lines),
                'lines_with_words': sum(1 for line in self.lines if not line.is_empty()),
                'motions': len(self.motions),
                'arc_motions': sum(1 for motion in self.motions if motion.is_arc),
                'errors': len(self.error_collector.errors),
            },
            'geometry': self.geometry_manager.get_statistics(),
        }

    def was_processing_successful(self) -> bool:
        """Check if the last processing was successful."""
        return self._processing_successful

    def get_last_processed_text(self) -> str:
        """Get the text that was last processed."""
        return self._last_processed_text

    # Utility methods

    def reset(self):
        """Reset processor to initial state."""
        self.error_collector.clear()
        self.geometry_manager.clear()
        self.lines = []
        self.motions = []
        self._last_processed_text = ""
        self._processing_successful = False

    def highlight_geometry_for_line(self, line_number: int) -> List[int]:
        """
        Get segment IDs that should be highlighted for a given line.
        Useful for editor-to-3D view synchronization.
        """
        return self.geometry_manager.get_segment_ids_for_line(line_number)

    def get_line_for_geometry(self, segment_id: int) -> Optional[int]:
        """
        Get the line number that generated a specific geometry segment.
        Useful for 3D view-to-editor synchronization.
        """
        segments = self.geometry_manager.segments
        if 0 <= segment_id < len(segments):
            return segments[segment_id].line_number
        return None

    def get_toolpath_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the toolpath for display purposes.
        """
        stats = self.get_statistics()
        min_point, max_point = self.get_bounding_box()

        return {
            'total_length': stats['geometry']['total_length'],
            'rapid_length': stats['geometry']['rapid_length'],
            'feed_length': stats['geometry']['feed_length'],
            'total_segments': stats['geometry']['total_segments'],
            'motions': stats['processing']['motions'],
            'bounding_box': {
                'min': min_point,
                'max': max_point,
                'size': [
                    max_point[0] - min_point[0],
                    max_point[1] - min_point[1],
                    max_point[2] - min_point[2]
                ]
            },
            'move_types': {
                'rapid': stats['geometry']['rapid_segments'],
                'feed': stats['geometry']['feed_segments'],
                'arc': stats['processing']['arc_motions']
            }
        }
