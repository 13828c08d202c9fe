"""
Modal G-code interpreter that turns parsed lines into motions.
"""
import logging
from typing import Iterable, List, Optional
from config.preview_config import PreviewConfig
from core.canonical import Motion, MotionType
from core.lexer import Letter
from core.machine_state import LineContext, MachineState
from core.parser import Line
from handlers.g_codes import GCodeHandlers
from handlers.m_codes import MCodeHandlers
from utils.errors import InterpreterError, InterpreterErrorReason
from utils.geometry import Point3D, is_arc_radius_consistent

logger = logging.getLogger(__name__)


class GCodeInterpreter:
    """
    Resolves parsed lines into absolute motions.

    All machine state belongs to a single run() call, so one interpreter can
    be reused and runs never see each other's state.
    """

    def __init__(self, config: Optional[PreviewConfig] = None):
        self.config = config or PreviewConfig()

    def run(self, lines: Iterable[Line]) -> List[Motion]:
        """
        Interpret lines in order and return the motions they produce.

        Interpretation stops early, successfully, at an M2 word.

        Raises:
            InterpreterError: On the first unknown command or bad arc. No
                motions are returned in that case.
        """
        machine_state = MachineState()
        g_code_handlers = GCodeHandlers(machine_state)
        m_code_handlers = MCodeHandlers(machine_state)
        motions: List[Motion] = []

        for line in lines:
            if line.is_empty():
                continue

            context = LineContext(line.line_number)

            for word in line.words:
                if word.letter is Letter.G:
                    g_code_handlers.execute_g_code(word, context)
                elif word.letter is Letter.M:
                    m_code_handlers.execute_m_code(word, context)
                    if context.program_end:
                        logger.debug("Stopped at M2 with %d motions", len(motions))
                        return motions
                else:
                    context.stage(word.letter, word.number)

            if context.machine_coordinates:
                # TODO: support G53 motion; the line's words are dropped for now
                logger.debug("Skipping machine-coordinate line %d", line.line_number)
                continue

            if context.has_axis_words():
                motions.append(self._resolve_motion(machine_state, context))

            machine_state.merge(context.delta)

        logger.debug("Interpreted %d motions", len(motions))
        return motions

    def _resolve_motion(self, machine_state: MachineState, context: LineContext) -> Motion:
        """Build the motion for a line that has at least one axis word."""
        delta = context.delta
        start = machine_state.current_position

        end_x = self._resolve_axis(machine_state, delta, Letter.X, start.x)
        end_y = self._resolve_axis(machine_state, delta, Letter.Y, start.y)
        end_z = self._resolve_axis(machine_state, delta, Letter.Z, start.z)
        end = Point3D(end_x, end_y, end_z)

        i_offset = machine_state.lookup(Letter.I, delta)
        j_offset = machine_state.lookup(Letter.J, delta)
        center = Point3D(start.x + i_offset, start.y + j_offset, start.z)

        motion_type = machine_state.motion_mode
        feed = None
        if motion_type is not MotionType.RAPID:
            feed = machine_state.lookup(Letter.F, delta)

        if motion_type.is_arc and not is_arc_radius_consistent(
                start, end, center,
                self.config.arc_absolute_tolerance,
                self.config.arc_minimum_tolerance,
                self.config.arc_relative_tolerance):
            raise InterpreterError(InterpreterErrorReason.BAD_ARC, context.line_number)

        return Motion(
            motion_type=motion_type,
            start=start,
            end=end,
            center=center,
            feed=feed,
            source_line_number=context.line_number,
        )

    @staticmethod
    def _resolve_axis(machine_state: MachineState, delta, letter: Letter, current: float) -> float:
        if letter not in delta:
            return current
        if machine_state.is_distance_mode_absolute():
            return float(delta[letter])
        return current + float(delta[letter])


def run(lines: Iterable[Line], config: Optional[PreviewConfig] = None) -> List[Motion]:
    """Interpret parsed lines with a fresh interpreter."""
    return GCodeInterpreter(config).run(lines)
