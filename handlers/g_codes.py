"""
G-code command handlers for the interpreter.
"""
import logging
from typing import Callable, Dict
from core.canonical import MotionType
from core.lexer import Word
from core.machine_state import DistanceMode, LineContext, MachineState
from utils.errors import InterpreterError, InterpreterErrorReason

logger = logging.getLogger(__name__)


class GCodeHandlers:
    """Handles execution of G-codes."""

    def __init__(self, machine_state: MachineState):
        self.machine_state = machine_state

        # G-code handler mapping; codes missing here are rejected
        self.handlers: Dict[int, Callable[[LineContext], None]] = {
            0: self.handle_g0_rapid_positioning,
            1: self.handle_g1_linear_interpolation,
            2: self.handle_g2_clockwise_arc,
            3: self.handle_g3_counterclockwise_arc,
            21: self.handle_g21_millimeters,
            53: self.handle_g53_machine_coordinates,
            90: self.handle_g90_absolute_distance,
            91: self.handle_g91_relative_distance,
        }

    def execute_g_code(self, word: Word, context: LineContext):
        """
        Execute a G word.

        Only integer codes are matched, so G1.0 is not G1.

        Raises:
            InterpreterError: UNKNOWN_COMMAND for any unsupported code.
        """
        handler = None
        if isinstance(word.number, int):
            handler = self.handlers.get(word.number)
        if handler is None:
            raise InterpreterError(InterpreterErrorReason.UNKNOWN_COMMAND,
                                   context.line_number, str(word))
        handler(context)

    def handle_g0_rapid_positioning(self, context: LineContext):
        """G0 - Rapid positioning (no feed rate)."""
        self.machine_state.motion_mode = MotionType.RAPID

    def handle_g1_linear_interpolation(self, context: LineContext):
        """G1 - Linear interpolation at the programmed feed rate."""
        self.machine_state.motion_mode = MotionType.LINEAR

    def handle_g2_clockwise_arc(self, context: LineContext):
        """G2 - Clockwise circular interpolation"""
        self.machine_state.motion_mode = MotionType.CLOCKWISE_ARC

    def handle_g3_counterclockwise_arc(self, context: LineContext):
        """G3 - Counterclockwise circular interpolation"""
        self.machine_state.motion_mode = MotionType.COUNTER_CLOCKWISE_ARC

    def handle_g21_millimeters(self, context: LineContext):
        """G21 - Programming in millimeters. Units are not converted."""

    def handle_g53_machine_coordinates(self, context: LineContext):
        """
        G53 - Move in machine coordinates (non-modal).

        Machine-coordinate motion is not modelled; the interpreter skips the
        whole line, including its staged words.
        """
        context.machine_coordinates = True

    def handle_g90_absolute_distance(self, context: LineContext):
        """G90 - Absolute distance mode"""
        self.machine_state.distance_mode = DistanceMode.ABSOLUTE

    def handle_g91_relative_distance(self, context: LineContext):
        """G91 - Relative distance mode"""
        self.machine_state.distance_mode = DistanceMode.RELATIVE
